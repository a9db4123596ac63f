"""Notification and audit dispatch for workflow transitions."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from locum.core.timeutils import utc_now
from locum.schemas.workflow import Application

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("locum.audit")


class EventType(StrEnum):
    APPLICATION_SUBMITTED = "application_submitted"
    APPLICATION_APPROVED = "application_approved"
    APPLICATION_REJECTED = "application_rejected"
    APPLICATION_WITHDRAWN = "application_withdrawn"
    APPLICATION_EXPIRED = "application_expired"
    DEADLINE_WARNING = "deadline_warning"
    CONTRACT_WORKFLOW_REQUESTED = "contract_workflow_requested"


@dataclass
class WorkflowEvent:
    """Something that happened to an application."""

    type: EventType
    application_id: str
    physician_id: str
    job_posting_id: str
    facility_id: str | None = None
    occurred_at: datetime = field(default_factory=utc_now)
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def for_application(
        cls,
        event_type: EventType,
        application: Application,
        facility_id: str | None = None,
        **payload: Any,
    ) -> "WorkflowEvent":
        return cls(
            type=event_type,
            application_id=application.id,
            physician_id=application.physician_id,
            job_posting_id=application.job_posting_id,
            facility_id=facility_id,
            payload=payload,
        )


EventSink = Callable[[WorkflowEvent], Awaitable[None]]

NOTIFICATION_TEXT = {
    EventType.APPLICATION_SUBMITTED: "New application received for your posting",
    EventType.APPLICATION_APPROVED: "Your application was approved",
    EventType.APPLICATION_REJECTED: "Your application was not selected",
    EventType.APPLICATION_WITHDRAWN: "An application was withdrawn",
    EventType.APPLICATION_EXPIRED: "An application expired without a decision",
    EventType.DEADLINE_WARNING: "An application review deadline is approaching",
}


async def audit_log_sink(event: WorkflowEvent) -> None:
    """Write a structured audit line for every event."""
    audit_logger.info(
        f"{event.type.value} application={event.application_id} "
        f"physician={event.physician_id} posting={event.job_posting_id} "
        f"facility={event.facility_id} at={event.occurred_at.isoformat()} "
        f"payload={event.payload}"
    )


async def notification_log_sink(event: WorkflowEvent) -> None:
    """Log the user-facing notification an event would send."""
    text = NOTIFICATION_TEXT.get(event.type)
    if text is None:
        return
    recipient = (
        f"facility {event.facility_id}"
        if event.type
        in (
            EventType.APPLICATION_SUBMITTED,
            EventType.APPLICATION_WITHDRAWN,
            EventType.DEADLINE_WARNING,
        )
        else f"physician {event.physician_id}"
    )
    logger.info(f"Notify {recipient}: {text} (application {event.application_id})")


class WorkflowEventDispatcher:
    """Fans events out to registered sinks.

    Dispatch is fire-and-forget: a failing sink is logged and never
    undoes or fails the transition that produced the event.
    """

    def __init__(self, sinks: list[EventSink] | None = None):
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []

    def register(self, sink: EventSink) -> None:
        self._sinks.append(sink)

    async def dispatch(self, event: WorkflowEvent) -> None:
        for sink in self._sinks:
            try:
                await sink(event)
            except Exception as e:
                logger.error(
                    f"Event sink {getattr(sink, '__name__', sink)!r} failed "
                    f"for {event.type.value} on application {event.application_id}: {e}"
                )

    async def dispatch_all(self, events: list[WorkflowEvent]) -> None:
        for event in events:
            await self.dispatch(event)


event_dispatcher = WorkflowEventDispatcher([audit_log_sink, notification_log_sink])
