"""Admission of inbound event batches into the propagation pipeline."""

from __future__ import annotations

import logging
from typing import Iterable

from headerprop.core.exceptions import InvalidNotificationError
from headerprop.header.paths import parse_object_url
from headerprop.models.events import EventType, NotificationEvent, ObjectCreatedNotification

logger = logging.getLogger(__name__)


def find_validation_code(events: Iterable[NotificationEvent]) -> str | None:
    """Return the handshake token if the batch opens with a subscription validation event."""
    for event in events:
        if event.event_type == EventType.SUBSCRIPTION_VALIDATION:
            return event.data.validation_code or ""
        return None
    return None


def admit_events(events: Iterable[NotificationEvent],
                 source_container: str) -> list[ObjectCreatedNotification]:
    """Keep object-created events for objects in ``source_container``.

    Events of other types, without a URL, with an unparseable URL or for another
    container are dropped.
    """
    admitted: list[ObjectCreatedNotification] = []
    for event in events:
        if event.event_type != EventType.OBJECT_CREATED or not event.data.url:
            continue
        try:
            location = parse_object_url(event.data.url)
        except InvalidNotificationError as exc:
            logger.debug("Dropping event %s: %s", event.id, exc)
            continue
        if location.container != source_container:
            continue
        admitted.append(ObjectCreatedNotification(location=location, event_id=event.id))
    return admitted
