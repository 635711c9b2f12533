import time
import logging
import uuid
from typing import Callable
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

# Responses carrying personal data
PRIVATE_PREFIXES = ("/api/v1/assessments", "/api/v1/service-request")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Request logging tagged with a short request id"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        logger.info(
            f"Request {request_id}: {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

        # Exception handlers read this to echo the id back
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.time() - start_time
            logger.error(f"Error {request_id}: {e} after {duration:.3f}s", exc_info=True)
            raise

        duration = time.time() - start_time
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(level, f"Response {request_id}: {response.status_code} in {duration:.3f}s")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Assessment answers and contact details must not be cached
        path = request.url.path
        if path.startswith(PRIVATE_PREFIXES) or "/admin/" in path:
            response.headers["Cache-Control"] = "no-store"

        return response


def setup_middleware(app: FastAPI) -> None:
    """Register CORS, compression, security headers and request logging"""
    from ..config import settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"]
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    # Added last so it wraps everything else
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(LoggingMiddleware)

    logger.info("Middleware setup complete")
