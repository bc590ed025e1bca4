# core/middleware.py

"""
Request pipeline stages wrapped around the routers:

    AuthenticationMiddleware → AuditMiddleware → routes (authorization
    dependencies, then the handler)

Authentication only resolves who is calling; routes decide whether
that is enough. Audit runs last, once the response status is final,
and writes its entry after the response has been sent.
"""

from typing import List, Optional

from fastapi import Request
from fastapi.concurrency import run_in_threadpool
from starlette.background import BackgroundTasks
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from core.audit import AuditRecorder, get_client_ip
from core.logging_config import logger
from dependencies.auth import decode_access_token, get_bearer_token


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Puts the bearer token's principal (or None) on request.state.user."""

    async def dispatch(self, request: Request, call_next) -> Response:
        user = None
        token = get_bearer_token(request)
        if token:
            user = decode_access_token(token)
            if user is None:
                logger.info(f"Rejected bearer token for {request.method} {request.url.path}")

        request.state.user = user
        return await call_next(request)


class AuditMiddleware(BaseHTTPMiddleware):
    """Records one audit entry per authenticated request with its final status."""

    def __init__(self, app, recorder: AuditRecorder, exempt_paths: Optional[List[str]] = None):
        super().__init__(app)
        self.recorder = recorder
        self.exempt_paths = exempt_paths or []

    async def dispatch(self, request: Request, call_next) -> Response:
        if any(request.url.path.startswith(path) for path in self.exempt_paths):
            return await call_next(request)

        try:
            response = await call_next(request)
        except Exception:
            # The app-level handler answers 500
            await run_in_threadpool(self._record, request, 500)
            raise

        # Sinks may do I/O: write after the response is sent, off the event loop
        tasks = BackgroundTasks()
        if getattr(response, "background", None) is not None:
            tasks.add_task(response.background)
        tasks.add_task(self._record, request, response.status_code)
        response.background = tasks
        return response

    def _record(self, request: Request, status: int):
        user = getattr(request.state, "user", None)
        if user is None:
            return
        self.recorder.record(
            user,
            method=request.method,
            path=request.url.path,
            status=status,
            ip=get_client_ip(request),
        )
