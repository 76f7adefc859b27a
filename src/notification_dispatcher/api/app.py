"""FastAPI application factory for the notification dispatcher.

Serves the sidecar push endpoint and the subscription descriptor. Run with::

    uvicorn notification_dispatcher.api.app:create_app --factory
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..config import Settings, get_settings
from ..log_config import configure_logging
from ..notifications.orchestrator import NotificationOrchestrator
from ..service import NotificationService
from ..subscriptions import dapr_subscriptions

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class _AppState:
    """Shared state for the lifespan and route closures.

    The lifespan sets ``orchestrator`` before requests are served and clears
    it only after in-flight requests drain.
    """

    settings: Settings
    orchestrator: NotificationOrchestrator | None = None
    service: NotificationService | None = None


def create_app(
    settings: Settings | None = None,
    orchestrator: NotificationOrchestrator | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Service settings; defaults to ``get_settings()``.
        orchestrator: Pre-built pipeline. When given, the lifespan neither
            builds a service nor touches the transport.
    """
    state = _AppState(settings=settings or get_settings(), orchestrator=orchestrator)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:  # noqa: ARG001
        if state.orchestrator is not None:
            yield
            return

        configure_logging(state.settings.log_level, state.settings.log_format)
        service = await NotificationService.create(state.settings)
        try:
            await service.start_consuming()
        except Exception:
            await service.close()
            raise
        state.service = service
        state.orchestrator = service.orchestrator
        logger.info(
            f"{state.settings.service_name} started "
            f"(provider={state.settings.messaging_provider})"
        )

        yield

        logger.info("Shutting down notification service...")
        state.orchestrator = None
        state.service = None
        await service.close()

    app = FastAPI(
        title=state.settings.service_name,
        version=state.settings.service_version,
        lifespan=lifespan,
    )

    @app.post("/events/{event_type}")
    async def handle_event(event_type: str, request: Request) -> JSONResponse:
        orchestrator = state.orchestrator
        if orchestrator is None:
            return JSONResponse(
                status_code=503,
                content={"status": "ERROR", "message": "Service not initialized"},
            )

        body: Any
        try:
            body = await request.json()
        except ValueError:
            logger.warning(f"Undecodable body for {event_type}; processing as empty payload")
            body = None

        try:
            result = await orchestrator.process(body, event_type)
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Error processing event {event_type}: {exc}")
            return JSONResponse(
                status_code=500, content={"status": "ERROR", "message": str(exc)}
            )

        logger.info(f"Event processed: {event_type} ({result.state.value})")
        return JSONResponse(status_code=200, content={"status": "SUCCESS"})

    @app.get("/dapr/subscribe")
    async def subscribe() -> list[dict[str, Any]]:
        return dapr_subscriptions(state.settings.dapr_pubsub_name)

    @app.get("/dapr/config")
    async def dapr_config() -> dict[str, Any]:
        return {}

    return app
