"""In-process event bus for development and testing.

Delivers each published message to every matching subscriber before
``notify`` returns, in subscription order.
"""

from shared.bus.port import EventBus, MessageCallback, Subscription


class InMemoryEventBus(EventBus):
    def __init__(self) -> None:
        self.subscriptions: list[Subscription] = []
        self.published: list[tuple[str, str]] = []

    def listen(
        self,
        topic: str,
        callback: MessageCallback,
        filter: str | None = None,
        once: bool = False,
    ) -> Subscription:
        subscription = Subscription(topic=topic, callback=callback, filter=filter, once=once)
        self.subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self.subscriptions:
            self.subscriptions.remove(subscription)

    async def notify(self, topic: str, message: str) -> None:
        self.published.append((topic, message))

        matching = [
            s for s in self.subscriptions if s.topic == topic and (s.filter is None or s.filter in message)
        ]
        for subscription in matching:
            if subscription.once:
                self.unsubscribe(subscription)
            await subscription.callback(message)
