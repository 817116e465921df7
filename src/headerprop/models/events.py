"""Inbound notification payloads."""

from __future__ import annotations

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EventType(StrEnum):
    OBJECT_CREATED = "ObjectCreated"
    SUBSCRIPTION_VALIDATION = "SubscriptionValidation"


class EventData(BaseModel):
    """Event body: object URL for creations, token for the validation handshake."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    url: Optional[str] = None
    validation_code: Optional[str] = Field(default=None, alias="validationCode")


class NotificationEvent(BaseModel):
    """A single event record of an inbound batch."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = ""
    event_type: str = Field(alias="eventType")
    subject: str = ""
    data: EventData = Field(default_factory=EventData)


class ObjectLocation(BaseModel):
    """An object addressed by container and full path."""

    model_config = ConfigDict(frozen=True)

    container: str
    path: str


class ObjectCreatedNotification(BaseModel):
    """An admitted object-creation notification, the unit of propagation."""

    model_config = ConfigDict(frozen=True)

    location: ObjectLocation
    event_id: str = ""
