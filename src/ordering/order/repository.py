"""Order persistence port and the in-memory adapter used in development and tests.

The repository stores whole snapshots keyed by order number. It offers no
concurrency control of its own; callers that need compare-and-swap semantics
must bring a repository that provides them.
"""

from abc import ABC, abstractmethod

from modeling.exceptions import OrderNotFoundError
from modeling.snapshot import Snapshot


class OrderRepository(ABC):
    @abstractmethod
    def save(self, order: Snapshot) -> Snapshot:
        ...

    @abstractmethod
    def find(self, order_no: str) -> Snapshot:
        """Return the latest snapshot, or raise OrderNotFoundError."""
        ...

    @abstractmethod
    def delete(self, order_no: str) -> None:
        ...


class InMemoryOrderRepository(OrderRepository):
    def __init__(self) -> None:
        self._orders: dict[str, Snapshot] = {}

    def save(self, order: Snapshot) -> Snapshot:
        self._orders[order["order_no"]] = order
        return order

    def find(self, order_no: str) -> Snapshot:
        try:
            return self._orders[order_no]
        except KeyError:
            raise OrderNotFoundError(order_no) from None

    def delete(self, order_no: str) -> None:
        self._orders.pop(order_no, None)
