"""Map gateway errors onto HTTP responses."""

import logging

from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from gdrive_gateway.errors import GatewayError

logger = logging.getLogger(__name__)


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Answer with the status code carried by the error."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed ({exc.kind.value}): {exc}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.kind.value}): {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Missing or malformed parameters are a 400, not FastAPI's default 422."""
    message = _describe_validation_error(exc)
    logger.warning(f"{request.method} {request.url.path} invalid request: {message}")
    return JSONResponse(status_code=400, content={"error": message})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort 500 with the error message in the body."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


async def catch_unhandled_errors(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Turn unexpected errors into 500s before the response leaves the CORS layer.

    Starlette runs handlers registered for Exception outside every user
    middleware, so those responses would lack CORS headers.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return await unhandled_error_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the gateway's exception handlers on an application.

    Must run before CORSMiddleware is added so the error middleware sits inside it.
    """
    app.middleware("http")(catch_unhandled_errors)
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
