"""Event ingestion endpoint."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, BackgroundTasks, Request, Response
from fastapi.responses import JSONResponse

from headerprop.core.exceptions import HeaderPropError
from headerprop.models.events import NotificationEvent, ObjectCreatedNotification
from headerprop.orchestration.ingestion import admit_events, find_validation_code
from headerprop.orchestration.orchestrator import PropagationOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


async def run_propagation(orchestrator: PropagationOrchestrator, run_id: str,
                          notifications: list[ObjectCreatedNotification]) -> None:
    logger.info("Started propagation run %s with %d notification(s)", run_id, len(notifications))
    try:
        await orchestrator.run(notifications)
    except HeaderPropError:
        logger.exception("Propagation run %s failed", run_id)
        return
    logger.info("Propagation run %s completed", run_id)


@router.post("/trigger", status_code=202)
async def trigger(events: list[NotificationEvent], request: Request,
                  background_tasks: BackgroundTasks):
    """Accept a batch of events; answers the subscription handshake synchronously."""
    code = find_validation_code(events)
    if code is not None:
        logger.debug("Subscription validation event received")
        return JSONResponse(status_code=200, content={"validationResponse": code})

    settings = request.app.state.settings
    notifications = admit_events(events, settings.storage.require_source())
    if notifications:
        background_tasks.add_task(
            run_propagation, request.app.state.orchestrator, str(uuid.uuid4()), notifications,
        )
    return Response(status_code=202)
