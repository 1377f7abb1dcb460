import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from servicegraph.exceptions import AppError, UnknownLifeEventError

logger = structlog.get_logger()


def error_body(exc: AppError) -> dict:
    body = {"error": exc.code, "message": exc.message}
    if isinstance(exc, UnknownLifeEventError):
        body["unknown_ids"] = exc.event_ids
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, code=exc.code, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    # subclasses resolve to this handler through the exception MRO
    app.add_exception_handler(AppError, app_error_handler)
