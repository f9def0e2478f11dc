import socket
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from greenlight.applications.interfaces.dtos.envelope import HealthcheckEnvelope, SystemInfo
from greenlight.domain.ports.services.logger import LoggerPort
from greenlight.infrastructure.config.dependencies import get_logger, get_settings
from greenlight.infrastructure.config.settings import VERSION, Settings
from greenlight.presentation.envelope import EnvelopeEncodeError, write_json
from greenlight.presentation.errors import server_error_response

router = APIRouter(prefix="/v1/healthcheck", tags=["healthcheck"])


@router.get("")
async def healthcheck(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    logger: Annotated[LoggerPort, Depends(get_logger)],
):
    payload = HealthcheckEnvelope(
        status="available",
        system_info=SystemInfo(environment=settings.ENV, version=VERSION, hostname=socket.gethostname()),
    )
    try:
        return write_json(HTTPStatus.OK, payload)
    except EnvelopeEncodeError as e:
        return server_error_response(logger, request, e)
