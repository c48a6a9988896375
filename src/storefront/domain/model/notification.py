"""Notification events broadcast to admin observers.

Events are ephemeral: they tell an observer that something changed so
it can re-read the authoritative listings. They are never the source
of truth and are not persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

NEW_ORDER_EVENT = "new_order_notification"


@dataclass(frozen=True)
class NotificationEvent:
    message: str
    category: str
    type: str = NEW_ORDER_EVENT
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_wire(self) -> dict[str, Any]:
        """Shape delivered to bus subscribers."""
        return {
            "type": self.type,
            "payload": {
                **self.payload,
                "message": self.message,
                "category": self.category,
                "createdAt": self.created_at.isoformat(),
            },
        }
