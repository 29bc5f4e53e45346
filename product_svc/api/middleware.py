"""HTTP middleware for the product service.

``RequestContextMiddleware`` gives every request a correlation ID that is
echoed in the ``X-Request-ID`` header, stored on ``request.state`` and bound
into the structlog context for the duration of the request.
``ErrorHandlerMiddleware`` turns anything the exception handlers in
``product_svc.main`` did not handle into the standard 500 envelope.
"""

import time
from typing import Awaitable, Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from product_svc.api.schemas import ErrorResponse

REQUEST_ID_HEADER = "X-Request-ID"

CallNext = Callable[[Request], Awaitable[Response]]

logger = structlog.get_logger()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlate logs and responses with a request ID.

    A caller-supplied ``X-Request-ID`` is reused; otherwise a UUID4 is
    generated.
    """

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        # Stays 500 if nothing downstream produced a response
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        with structlog.contextvars.bound_contextvars(request_id=request_id):
            try:
                response = await call_next(request)
                status_code = response.status_code
            finally:
                logger.info(
                    "Request completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last-resort handler: unexpected exceptions become an opaque 500."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled exception",
                method=request.method,
                path=request.url.path,
            )
            body = ErrorResponse(
                error_code="INTERNAL_ERROR",
                message="An internal error occurred",
                request_id=getattr(request.state, "request_id", None),
            )
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=body.model_dump(),
            )


def setup_middleware(app: FastAPI) -> None:
    """Install the service middleware on ``app``.

    Starlette runs the last-added middleware first, so the request context
    wraps the error handler and error bodies carry the request ID.

    Args:
        app: FastAPI application instance.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestContextMiddleware)
