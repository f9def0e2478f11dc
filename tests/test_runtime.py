import json

import pytest
from pydantic import BaseModel, ValidationError

from greenlight.domain.models.runtime import InvalidRuntimeFormatError, Runtime


class _Holder(BaseModel):
    runtime: Runtime


class TestRuntimeEncoding:
    def test_to_json(self):
        assert Runtime(107).to_json() == "107 mins"
        assert Runtime(0).to_json() == "0 mins"
        assert Runtime(-3).to_json() == "-3 mins"

    def test_serializes_as_string_in_json(self):
        assert json.loads(_Holder(runtime=Runtime(102)).model_dump_json()) == {"runtime": "102 mins"}

    def test_stays_an_integer_in_python(self):
        dumped = _Holder(runtime=Runtime(102)).model_dump()

        assert dumped["runtime"] == 102


class TestRuntimeParsing:
    @pytest.mark.parametrize(
        "raw,expected",
        [("107 mins", 107), ("0 mins", 0), ("-5 mins", -5), ("+12 mins", 12), ("2147483647 mins", 2**31 - 1)],
    )
    def test_parse_accepts(self, raw, expected):
        assert Runtime.parse(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "107",
            "107 min",
            "107  mins",
            " 107 mins",
            "107 mins\n",
            "107 mins ",
            "abc mins",
            "1.5 mins",
            "",
            "2147483648 mins",
            107,
            None,
        ],
    )
    def test_parse_rejects(self, raw):
        with pytest.raises(InvalidRuntimeFormatError, match="invalid runtime format"):
            Runtime.parse(raw)

    def test_json_requires_string(self):
        with pytest.raises(ValidationError) as exc_info:
            _Holder.model_validate_json('{"runtime": 107}')

        assert exc_info.value.errors()[0]["type"] == "invalid_runtime_format"

    def test_json_string_is_decoded(self):
        assert _Holder.model_validate_json('{"runtime": "99 mins"}').runtime == 99

    def test_python_accepts_int_but_not_bool(self):
        assert _Holder(runtime=90).runtime == 90

        with pytest.raises(ValidationError):
            _Holder(runtime=True)
