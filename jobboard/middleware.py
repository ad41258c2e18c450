"""
App-level HTTP middleware: request logging, security headers, rate limiting.
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .auth import client_ip

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
}


def register_middleware(app: FastAPI) -> None:
    """Attach the middleware stack. Starlette runs the last one added first."""

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        limiter = getattr(request.app.state, "rate_limiter", None)
        if limiter is None or not request.url.path.startswith("/api/"):
            return await call_next(request)

        result = limiter.check(client_ip(request))
        if not result.allowed:
            retry_after = limiter.retry_after(result)
            logger.warning("rate limit hit for %s on %s", client_ip(request), request.url.path)
            return JSONResponse(
                status_code=429,
                content={"success": False, "error": limiter.message, "retryAfter": retry_after},
                headers={"Retry-After": str(retry_after)},
            )
        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        return response

    @app.middleware("http")
    async def security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def request_timer(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.info("%s %s %s %.3fs", request.method, request.url.path, response.status_code, elapsed)
        return response
