"""FastAPI application receiving GitHub webhooks."""

from __future__ import annotations

import json
import logging
from typing import Callable

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from ..config import Settings
from ..logging import get_logger
from ..models import ProcessingContext
from ..processor import RepositoryProcessor
from ..security import verify_signature
from ..webhooks import PUSH_EVENT, InvalidPayloadError, is_bot_commit, resolve_context

SIGNATURE_HEADER = "x-hub-signature-256"
EVENT_HEADER = "x-github-event"


class HealthResponse(BaseModel):
    status: str


async def run_in_background(
    processor_factory: Callable[[], RepositoryProcessor],
    context: ProcessingContext,
    logger: logging.Logger,
) -> None:
    """Run one documentation job; failures are logged and never reach the caller."""
    try:
        processor = processor_factory()
        await processor.process(context)
    except Exception:
        logger.exception("Background documentation run failed for %s", context.slug)


def create_app(
    settings: Settings,
    processor_factory: Callable[[], RepositoryProcessor] | None = None,
    *,
    logger: logging.Logger | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing the webhook and health endpoints."""
    log = logger or get_logger("service")

    def _default_processor() -> RepositoryProcessor:
        return RepositoryProcessor.from_settings(settings)

    factory = processor_factory or _default_processor

    app = FastAPI(title="docagent", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/webhook")
    async def webhook(request: Request, background_tasks: BackgroundTasks) -> PlainTextResponse:
        raw_body = await request.body()
        if not verify_signature(raw_body, request.headers.get(SIGNATURE_HEADER), settings.webhook_secret):
            log.warning("Rejected webhook delivery with invalid signature")
            return PlainTextResponse("Invalid signature", status_code=401)

        event = request.headers.get(EVENT_HEADER, "")
        try:
            payload = json.loads(raw_body)
        except ValueError:
            return PlainTextResponse("Invalid payload", status_code=400)
        if not isinstance(payload, dict):
            return PlainTextResponse("Invalid payload", status_code=400)

        if event == PUSH_EVENT and is_bot_commit(payload, settings.commit_actor):
            log.info("Ignoring push authored by %s", settings.commit_actor)
            return PlainTextResponse("ignored bot commit", status_code=202)

        try:
            context = resolve_context(event, payload)
        except InvalidPayloadError as exc:
            log.warning("Rejected %s webhook: %s", event or "unknown", exc)
            return PlainTextResponse("Invalid payload", status_code=400)

        if context is not None:
            log.info("Scheduling documentation run for %s (%s event)", context.slug, event)
            background_tasks.add_task(run_in_background, factory, context, log)
        return PlainTextResponse("accepted", status_code=202)

    return app


def run_service(
    settings: Settings, host: str = "0.0.0.0", port: int | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(settings)
    listen_port = port or settings.port
    get_logger("service").info("Documentation app listening on %s", listen_port)
    uvicorn.run(app, host=host, port=listen_port)
