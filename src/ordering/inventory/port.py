"""Inventory port (abstract interface)."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class FillResult:
    """Outcome of a fill-order request."""

    success: bool
    pickup_address: str | None = None
    failure_reason: str | None = None


class InventoryService(ABC):
    """Abstract inventory interface."""

    @abstractmethod
    async def fill_order(self, order_no: str, order_items: Sequence[dict]) -> FillResult:
        """Pick the order's items and return the warehouse to collect them from."""
        ...
