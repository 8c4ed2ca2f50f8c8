from __future__ import annotations

import logging
from typing import Iterable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from starlette.datastructures import MutableHeaders
from starlette.requests import ClientDisconnect
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from . import __version__
from .clock import ProcessClock, process_clock
from .config import ServerConfig
from .models import StatusDocument
from .reflect import build_echo_document

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
STATUS_ROUTE = "/status"
ECHO_ROUTE = "/{path:path}"


# === Helpers ===


class ServerHeaderMiddleware:
    """Stamp ``X-Server`` on every response that passes through the app."""

    def __init__(self, app: ASGIApp, server_name: str) -> None:
        self.app = app
        self.server_name = server_name

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_header(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)["X-Server"] = self.server_name
            await send(message)

        await self.app(scope, receive, send_with_header)


def read_document(paths: Iterable[str]) -> Optional[bytes]:
    """Return the bytes of the first readable path, or None if none can be read."""
    for path in paths:
        try:
            with open(path, "rb") as fh:
                return fh.read()
        except OSError as exc:
            logger.warning("Error reading %s: %s", path, exc)
    return None


def check_document_route(route: str) -> None:
    if route == STATUS_ROUTE:
        logger.warning("Document route %s collides with the status route; status takes precedence", route)
    if "{" in route or "}" in route:
        logger.warning("Document route %s contains braces and will be matched as a path pattern", route)


def create_app(config: Optional[ServerConfig] = None, clock: ProcessClock = process_clock) -> FastAPI:
    """Build the application with its three routes registered.

    Every route is bound before the app is returned, so the listener only
    ever sees a finished route table. Routes carry no method filter, and
    FastAPI's own docs routes are left out so that the echo route answers
    every path the other two do not.
    """
    config = config or ServerConfig()
    check_document_route(config.document_route)
    app = FastAPI(
        title="http-swagger-server",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_middleware(ServerHeaderMiddleware, server_name=config.server_name)

    # Unhandled errors are answered outside the middleware stack.
    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception) -> Response:
        return PlainTextResponse(
            "Internal Server Error",
            status_code=500,
            headers={"X-Server": config.server_name},
        )

    # === Status ===

    def status(request: Request) -> Response:
        content = b""
        try:
            content = StatusDocument(uptime=clock.uptime()).model_dump_json()
        except ValueError as exc:
            logger.error("Error happened in JSON marshal. Err: %s", exc)
        return Response(content=content, media_type=JSON_MEDIA_TYPE)

    # === Document ===

    def document(request: Request) -> Response:
        content = read_document(config.document_paths)
        if content is None:
            logger.error("No readable swagger document among %s", ", ".join(config.document_paths))
            return Response(status_code=500)
        return Response(content=content, media_type=JSON_MEDIA_TYPE)

    # === Echo ===

    async def echo(request: Request) -> Response:
        try:
            body = await request.body()
        except ClientDisconnect:
            return PlainTextResponse("Failed to read request body", status_code=500)

        doc = build_echo_document(request, body, expose_environment=config.expose_environment)
        try:
            content = doc.model_dump_json()
        except ValueError as exc:
            logger.error("Failed to encode JSON response: %s", exc)
            return PlainTextResponse("Failed to encode JSON response", status_code=500)
        return Response(content=content, media_type=JSON_MEDIA_TYPE)

    # Plain routes with methods=None match every HTTP method.
    app.router.add_route(STATUS_ROUTE, status)
    app.router.add_route(config.document_route, document)
    app.router.add_route(ECHO_ROUTE, echo)

    return app
