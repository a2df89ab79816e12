import logging
from typing import Any

from fastapi import Request, HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from bloodreport.middleware.tracing import TRACE_ID_CTX_VAR

logger = logging.getLogger("bloodreport")


def status_to_code(status_code: int) -> str:
    mapping = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        413: "PAYLOAD_TOO_LARGE",
        415: "UNSUPPORTED_MEDIA_TYPE",
        422: "UNPROCESSABLE_ENTITY",
        429: "TOO_MANY_REQUESTS",
        500: "INTERNAL_SERVER_ERROR",
    }
    return mapping.get(status_code, f"HTTP_{status_code}")


def _trace_id(request: Request) -> str:
    return getattr(request.state, "trace_id", None) or TRACE_ID_CTX_VAR.get()


def error_body(request: Request, status_code: int, message: str, details: Any = None) -> dict:
    body = {"code": status_to_code(status_code), "message": message, "trace_id": _trace_id(request)}
    if details is not None:
        body["details"] = details
    return body


async def handle_http_exception(request: Request, exc: HTTPException):
    detail: Any = exc.detail
    message = detail if isinstance(detail, str) else "HTTP error"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(request, exc.status_code, message, detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_exception(request: Request, exc: RequestValidationError):
    code = status.HTTP_422_UNPROCESSABLE_ENTITY
    return JSONResponse(
        status_code=code,
        content=error_body(request, code, "Request validation failed", jsonable_encoder(exc.errors())),
    )


async def handle_rate_limit(request: Request, exc: RateLimitExceeded):
    logger.info({
        "function": "rate_limit",
        "path": str(request.url.path),
        "limit": str(getattr(exc, "detail", "")),
    })
    code = status.HTTP_429_TOO_MANY_REQUESTS
    return JSONResponse(
        status_code=code,
        headers={"Retry-After": "60"},
        content=error_body(request, code, "Too many requests. Please wait a bit and try again."),
    )


async def handle_unhandled_exception(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(
        status_code=code,
        content=error_body(request, code, "An unexpected error occurred"),
    )
