"""Map domain errors onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from stockroom.shared.errors import DuplicateProductId, InsufficientStock
from stockroom.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_BY_ERROR = [
    (DuplicateProductId, 409),
    (InsufficientStock, 409),
    (ObjectNotFoundError, 404),
    (ValidationError, 422),
]


def _messages(exc) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return dict(messages)
    return {"detail": [str(messages or exc)]}


def _handler(status_code: int):
    async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
        logger.info(
            "api.domain_error",
            path=request.url.path,
            error=type(exc).__name__,
            status_code=status_code,
        )
        return JSONResponse(status_code=status_code, content={"errors": _messages(exc)})

    return handle_domain_error


def register_exception_handlers(app: FastAPI) -> None:
    for error_cls, status_code in _STATUS_BY_ERROR:
        app.add_exception_handler(error_cls, _handler(status_code))
