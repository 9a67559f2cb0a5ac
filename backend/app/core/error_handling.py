"""Request-id propagation, request timing logs, and uniform JSON error bodies."""

from __future__ import annotations

from time import perf_counter
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from fastapi import status
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers, MutableHeaders
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging import get_logger

if TYPE_CHECKING:
    from fastapi import FastAPI
    from starlette.requests import Request
    from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-Id"
HEALTH_PATHS = frozenset({"/health", "/healthz", "/readyz"})
logger = get_logger(__name__)


def _new_request_id() -> str:
    return uuid4().hex


def _get_request_id(request: Request) -> str | None:
    value = getattr(request.state, "request_id", None)
    if isinstance(value, str) and value:
        return value
    return None


def _error_payload(*, detail: object, request_id: str | None) -> dict[str, object]:
    payload: dict[str, object] = {"detail": detail}
    if request_id is not None:
        payload["request_id"] = request_id
    return payload


def _json_safe(value: object) -> object:
    """Convert validation error fragments into JSON-serializable values."""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, dict):
        return {str(key): _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


def _error_response(
    request: Request,
    *,
    status_code: int,
    detail: object,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    request_id = _get_request_id(request)
    response_headers = dict(headers or {})
    if request_id is not None:
        response_headers[REQUEST_ID_HEADER] = request_id
    return JSONResponse(
        status_code=status_code,
        content=_error_payload(detail=detail, request_id=request_id),
        headers=response_headers,
    )


async def _request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, RequestValidationError):
        msg = "Expected RequestValidationError"
        raise TypeError(msg)
    return _error_response(
        request,
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=_json_safe(exc.errors()),
    )


async def _response_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, ResponseValidationError):
        msg = "Expected ResponseValidationError"
        raise TypeError(msg)
    logger.error(
        "http.response.validation_failed",
        extra={"path": request.url.path, "request_id": _get_request_id(request)},
    )
    return _error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal Server Error",
    )


async def _http_exception_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    if not isinstance(exc, StarletteHTTPException):
        msg = "Expected StarletteHTTPException"
        raise TypeError(msg)
    return _error_response(
        request,
        status_code=exc.status_code,
        detail=exc.detail,
        headers=exc.headers,
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "http.request.unhandled_error",
        exc_info=exc,
        extra={"path": request.url.path, "request_id": _get_request_id(request)},
    )
    return _error_response(
        request,
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal Server Error",
    )


class RequestIdMiddleware:
    """Attach a request id to every HTTP request and log slow requests."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        supplied = (Headers(scope=scope).get(REQUEST_ID_HEADER) or "").strip()
        request_id = supplied or _new_request_id()
        scope.setdefault("state", {})["request_id"] = request_id
        path = str(scope.get("path", ""))
        method = str(scope.get("method", ""))
        log_request = settings.request_log_include_health or path not in HEALTH_PATHS
        response_status: dict[str, Any] = {"code": status.HTTP_500_INTERNAL_SERVER_ERROR}

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                response_status["code"] = message["status"]
                headers = MutableHeaders(scope=message)
                if REQUEST_ID_HEADER not in headers:
                    headers.append(REQUEST_ID_HEADER, request_id)
            await send(message)

        started = perf_counter()
        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            if log_request:
                duration_ms = round((perf_counter() - started) * 1000, 2)
                context = {
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "status_code": response_status["code"],
                    "duration_ms": duration_ms,
                }
                if duration_ms >= settings.request_log_slow_ms:
                    logger.warning(
                        "http.request.slow",
                        extra={**context, "slow_threshold_ms": settings.request_log_slow_ms},
                    )
                else:
                    logger.debug("http.request.completed", extra=context)


def install_error_handling(app: FastAPI) -> None:
    """Register request-id middleware and JSON exception handlers on an app."""
    app.add_middleware(RequestIdMiddleware)
    app.add_exception_handler(RequestValidationError, _request_validation_exception_handler)
    app.add_exception_handler(ResponseValidationError, _response_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
