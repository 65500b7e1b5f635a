"""FastAPI application: Slack webhooks, health probes and OpenAPI docs.

WHY: When SnagBot runs in HTTP mode, Slack delivers events and slash
commands to public endpoints. The same process also has to answer
liveness/readiness probes from whatever is running it.

HOW: create_api() builds a FastAPI app around a ServiceHub. If a bolt App
is supplied, POST /api/events and POST /api/commands are forwarded to it
through slack-bolt's FastAPI adapter (which verifies Slack's request
signature). run_api() wires everything from the environment and serves
it with uvicorn.

RULES:
- /health never touches the store; /ready pings it and returns 503 on failure
- Endpoints that do blocking store I/O are plain `def` so FastAPI runs
  them in its threadpool, off the event loop that serves /api/events
- The store is closed on application shutdown
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slack_bolt import App
from slack_bolt.adapter.fastapi import SlackRequestHandler

from snagbot import __version__
from snagbot.container import ServiceHub
from snagbot.server.models import ErrorResponse, HealthResponse, MessageResponse, ReadyResponse

logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "Snags are cooking 🌭"
HELLO_MESSAGE = "Hello, world! SnagBot is running."


def create_api(hub: ServiceHub, bolt_app: Optional[App] = None) -> FastAPI:
    """Create the FastAPI app for one ServiceHub.

    RULES:
    - Slack routes exist only when bolt_app is given
    - Each call returns an independent app (tests build their own)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        logger.info("Shutting down, closing %s store", hub.store.backend_name)
        hub.store.close()

    app = FastAPI(
        lifespan=lifespan,
        title="SnagBot API",
        description=(
            "Slack webhooks and health probes for SnagBot, the bot that "
            "converts dollar amounts in chat into Bunnings snags (or any "
            "other item a channel configures)."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # -----------------------------------------------------------------------
    # Endpoints: Slack
    # -----------------------------------------------------------------------

    if bolt_app is not None:
        slack_handler = SlackRequestHandler(bolt_app)

        @app.post(
            "/api/events",
            tags=["slack"],
            summary="Slack Events API webhook",
            description="Receives message events (and the url_verification challenge) from Slack.",
        )
        async def slack_events(req: Request):
            return await slack_handler.handle(req)

        @app.post(
            "/api/commands",
            tags=["slack"],
            summary="Slack slash command webhook",
            description="Receives /snagbot invocations from Slack.",
        )
        async def slack_commands(req: Request):
            return await slack_handler.handle(req)

    # -----------------------------------------------------------------------
    # Endpoints: Health
    # -----------------------------------------------------------------------

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"],
        summary="Liveness check",
        description="Answers as long as the process is running.",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok", message=HEALTH_MESSAGE, version=__version__)

    @app.get(
        "/ready",
        response_model=ReadyResponse,
        tags=["health"],
        summary="Readiness check",
        description="Pings the configuration store; 503 when it does not answer.",
        responses={
            503: {"model": ReadyResponse, "description": "Configuration store unavailable"},
        },
    )
    def ready_check():
        backend = hub.store.backend_name
        if not hub.store.ping():
            logger.warning("Readiness check failed: %s store did not answer", backend)
            return JSONResponse(
                status_code=503,
                content=ReadyResponse(status="unavailable", store=backend).model_dump(),
            )
        return ReadyResponse(status="ready", store=backend)

    @app.get(
        "/hello",
        response_model=MessageResponse,
        tags=["health"],
        summary="Greeting",
        responses={
            500: {"model": ErrorResponse, "description": "Unexpected server error"},
        },
    )
    async def hello() -> MessageResponse:
        return MessageResponse(message=HELLO_MESSAGE)

    return app


def run_api(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Entry point for the snagbot-api console script and `snagbot serve`."""
    import uvicorn

    from snagbot.cli import configure_logging
    from snagbot.container import build_container
    from snagbot.slack.bot import create_app

    hub = build_container()
    configure_logging(hub.settings.log_level)
    bolt_app = create_app(hub)
    api = create_api(hub, bolt_app)

    host = host or hub.settings.host
    port = port or hub.settings.port
    logger.info("Starting SnagBot HTTP server on %s:%d (store: %s)", host, port, hub.store.backend_name)
    uvicorn.run(api, host=host, port=port, log_level=hub.settings.log_level.lower())
