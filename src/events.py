# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""In-process event bus for permission change notifications."""

import logging
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class AppEvent(str, Enum):
    """Application events that listeners can subscribe to."""

    STAFF_PERMISSIONS_UPDATED = "staff.permissions.updated"
    STAFF_PERMISSIONS_REPLACED = "staff.permissions.replaced"


@dataclass
class EventPayload:
    """Payload for an application event."""

    event_type: AppEvent
    timestamp: datetime
    data: dict[str, Any]


# Type alias for event handlers
EventHandler = Callable[[EventPayload], Any]


class EventBus:
    """Central event bus for application-wide events.

    Handlers run synchronously in subscription order. A failing handler is
    logged and skipped; it never aborts the operation that published.
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: dict[AppEvent, list[tuple[str | None, EventHandler]]] = (
            defaultdict(list)
        )

    def subscribe(
        self,
        event_type: AppEvent,
        handler: EventHandler,
        subscriber_id: str | None = None,
    ) -> None:
        """Subscribe to an event.

        Args:
            event_type: Event type to subscribe to
            handler: Function to call when the event fires
            subscriber_id: Optional name used for logging and bulk removal
        """
        self._handlers[event_type].append((subscriber_id, handler))
        logger.debug(
            f"Subscribed {subscriber_id or 'anonymous handler'} "
            f"to event {event_type.value}"
        )

    def unsubscribe(
        self,
        event_type: AppEvent,
        handler: EventHandler,
        subscriber_id: str | None = None,
    ) -> None:
        """Remove a previously subscribed handler."""
        entry = (subscriber_id, handler)
        if entry in self._handlers[event_type]:
            self._handlers[event_type].remove(entry)

    def unsubscribe_all(self, subscriber_id: str) -> None:
        """Remove every handler registered under a subscriber id."""
        for event_type in list(self._handlers.keys()):
            self._handlers[event_type] = [
                (sid, handler)
                for sid, handler in self._handlers[event_type]
                if sid != subscriber_id
            ]

    def publish(self, event_type: AppEvent, data: dict[str, Any]) -> None:
        """Publish an event to all subscribers.

        Args:
            event_type: Type of event
            data: Event data payload
        """
        payload = EventPayload(
            event_type=event_type,
            timestamp=datetime.utcnow(),
            data=data,
        )

        for subscriber_id, handler in list(self._handlers.get(event_type, [])):
            try:
                handler(payload)
            except Exception as e:
                logger.error(
                    f"Error in event handler for {event_type.value} "
                    f"(subscriber: {subscriber_id}): {e}"
                )

    def get_subscriber_count(self, event_type: AppEvent) -> int:
        """Get the number of subscribers for an event type."""
        return len(self._handlers.get(event_type, []))


# Global event bus singleton
event_bus = EventBus()
