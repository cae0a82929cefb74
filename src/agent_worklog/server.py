"""Local loopback API serving the work log and summaries to the web viewer."""

from __future__ import annotations

import json
import logging
import secrets
import threading
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .errors import WorklogError
from .storage import WorklogQueries, WorklogQuery
from .summary import SummaryOrchestrator, SummaryRequest

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
UNAUTHENTICATED_PATHS = frozenset({"/health"})
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Authorization, Content-Type",
}


def generate_token() -> str:
    return secrets.token_hex(32)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=CORS_HEADERS)


def provided_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer ") :]
    return request.query_params.get("token")


def create_app(
    token: str,
    *,
    queries: WorklogQueries,
    orchestrator: SummaryOrchestrator,
) -> FastAPI:
    """Build the API. Every route except ``/health`` and preflights requires ``token``."""

    app = FastAPI(
        title="Agent Work Log",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.middleware("http")
    async def authenticate(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(
                status_code=204,
                headers={**CORS_HEADERS, "Access-Control-Max-Age": "86400"},
            )
        if request.url.path not in UNAUTHENTICATED_PATHS:
            candidate = provided_token(request)
            if candidate is None or not secrets.compare_digest(candidate, token):
                return error_response(401, "Unauthorized")
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            return error_response(404, "Not found")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    @app.exception_handler(ValidationError)
    async def validation_error(_request: Request, exc: Exception) -> JSONResponse:
        return error_response(400, str(exc))

    @app.exception_handler(WorklogError)
    async def worklog_error(_request: Request, exc: WorklogError) -> JSONResponse:
        logger.error("Request failed: %s", exc)
        return error_response(500, str(exc))

    @app.exception_handler(Exception)
    async def unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error serving request")
        return error_response(500, str(exc) or "Internal server error")

    @app.get("/health")
    def health() -> dict:
        return {"ok": True}

    @app.get("/api/worklog")
    def worklog(request: Request) -> dict:
        filters = WorklogQuery.model_validate(dict(request.query_params))
        result = queries.query(filters)
        return {
            **result.to_dict(),
            "categories": queries.distinct_categories(),
            "projects": queries.distinct_projects(),
        }

    @app.post("/api/summary")
    async def summary(request: Request) -> dict:
        body = await request.body()
        try:
            payload = json.loads(body) if body.strip() else {}
        except json.JSONDecodeError:
            return error_response(400, "Request body must be JSON")
        if not isinstance(payload, dict):
            return error_response(400, "Request body must be a JSON object")
        summary_request = SummaryRequest.model_validate(payload)
        result = await run_in_threadpool(orchestrator.summarize, summary_request)
        return result.to_dict()

    return app


class WorklogServer:
    """One running API instance: its token, its listener and its lifecycle."""

    def __init__(
        self,
        *,
        queries: WorklogQueries,
        orchestrator: SummaryOrchestrator,
        host: str = DEFAULT_HOST,
        port: int = 24377,
        token: str | None = None,
    ) -> None:
        self.host = host
        self.token = token or generate_token()
        self.app = create_app(self.token, queries=queries, orchestrator=orchestrator)
        config = uvicorn.Config(self.app, host=host, port=port, log_level="warning", lifespan="off")
        self._server = uvicorn.Server(config)
        self._requested_port = port
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int:
        servers = getattr(self._server, "servers", None) or []
        for server in servers:
            for sock in server.sockets or ():
                return int(sock.getsockname()[1])
        return self._requested_port

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, timeout: float = 10.0) -> None:
        """Serve on a background thread and return once the socket is listening."""

        self._thread = threading.Thread(target=self._server.run, name="aw-web", daemon=True)
        self._thread.start()
        deadline = time.monotonic() + timeout
        while not self._server.started:
            if not self._thread.is_alive():
                raise OSError(f"Could not start server on {self.host}:{self._requested_port}")
            if time.monotonic() > deadline:
                self.stop()
                raise TimeoutError("Server did not start in time")
            time.sleep(0.05)
        logger.info("Serving work log API on %s:%d", self.host, self.port)

    def wait(self) -> None:
        """Block until the server exits. Ctrl-C triggers a graceful stop."""

        try:
            while self.running:
                self._thread.join(0.5)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        self._server.should_exit = True
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        logger.info("Work log API stopped")


__all__ = ["CORS_HEADERS", "WorklogServer", "create_app", "generate_token"]
