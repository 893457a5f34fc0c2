from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class NoStoreMiddleware(BaseHTTPMiddleware):
    """Every response is live state; tell browsers and proxies not to cache it."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["Cache-Control"] = "no-store"
        return response


class BareOptionsMiddleware(BaseHTTPMiddleware):
    """Answers any OPTIONS that CORSMiddleware did not treat as a preflight."""

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204)
        return await call_next(request)
