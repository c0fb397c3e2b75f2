import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ChangeEvent(BaseModel):
    table: str  # "shifts" | "leave_requests" | "leave_entitlements"
    action: str  # "insert" | "update" | "delete"
    company_id: int
    record_id: Optional[int] = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


Subscriber = Callable[[ChangeEvent], None]


class ChangeFeed:
    """
    Fire-and-forget change notifications.
    Consumers re-fetch and rebuild their views on every event; no diffs are sent.
    """

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        self._subscribers.append(subscriber)

        def unsubscribe():
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)
        return unsubscribe

    def publish(self, event: ChangeEvent) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception as e:
                # Subscriber errors never reach the writer
                logger.warning(f"Change notification failed: {e}", exc_info=True)

    def notify(self, table: str, action: str, company_id: int, record_id: Optional[int] = None) -> None:
        self.publish(ChangeEvent(table=table, action=action, company_id=company_id, record_id=record_id))
