"""Event bus port (abstract interface).

Collaborators that talk to the order service asynchronously (the inventory
service, for one) do so through topics on an event bus. Messages are JSON
strings; the ordering code never depends on the transport behind them.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

MessageCallback = Callable[[str], Awaitable[None]]


@dataclass(frozen=True, eq=False)
class Subscription:
    topic: str
    callback: MessageCallback
    filter: str | None = None
    once: bool = False


class EventBus(ABC):
    """Abstract event bus interface."""

    @abstractmethod
    def listen(
        self,
        topic: str,
        callback: MessageCallback,
        filter: str | None = None,
        once: bool = False,
    ) -> Subscription:
        """Subscribe to messages on ``topic``.

        When ``filter`` is given only messages containing it are delivered.
        A ``once`` subscription is removed after its first delivery.
        """
        ...

    @abstractmethod
    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription. Unknown subscriptions are ignored."""
        ...

    @abstractmethod
    async def notify(self, topic: str, message: str) -> None:
        """Publish ``message`` on ``topic``."""
        ...
