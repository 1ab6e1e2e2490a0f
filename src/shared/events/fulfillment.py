"""Cross-service message contracts published by shipping carriers.

Carriers report shipment progress as TrackingEvents. The ordering workflow
only reacts to the delivered status; other statuses are informational.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class TrackingStatus(Enum):
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    EXCEPTION = "exception"


class TrackingEvent(BaseModel):
    """A carrier status update for one shipment."""

    shipment_id: str
    order_no: str
    status: TrackingStatus
    location: str | None = None
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def delivered(self) -> bool:
        return self.status is TrackingStatus.DELIVERED
