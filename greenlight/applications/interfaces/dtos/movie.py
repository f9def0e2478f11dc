from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from greenlight.domain.models.runtime import INT32_MAX, INT32_MIN, Runtime

Int32 = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


class MovieInput(BaseModel):
    """Request body for create and update.

    Absent or null fields decode to ``None``: on create the validator reports them as
    missing, on update they leave the stored value unchanged.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    title: Optional[str] = None
    year: Optional[Int32] = None
    runtime: Optional[Runtime] = None
    genres: Optional[List[str]] = None


class MoviePublic(BaseModel):
    id: int
    created_at: datetime
    title: str
    year: int
    runtime: Runtime
    genres: List[str]
    version: int
    model_config = ConfigDict(from_attributes=True)
