"""Fake warehouse that answers fillOrder commands on the event bus.

Pairs with EventBusInventory in tests and local development: it listens on
the inventory channel and replies on the command's reply channel.
"""

from ordering.inventory.fake_adapter import DEFAULT_WAREHOUSE
from shared.bus.port import EventBus, Subscription
from shared.events.inventory import (
    INVENTORY_CHANNEL,
    ORDER_BACKORDERED,
    FillOrderCommand,
    OrderFilled,
    OrderFilledData,
)


class FakeWarehouse:
    def __init__(self, bus: EventBus, warehouse_addr: str = DEFAULT_WAREHOUSE, channel: str = INVENTORY_CHANNEL):
        self.bus = bus
        self.warehouse_addr = warehouse_addr
        self.channel = channel
        self.should_succeed = True
        self.should_reply = True
        self.failure_reason = "Out of stock"
        self.commands: list[FillOrderCommand] = []
        self.subscription: Subscription | None = None

    def configure(self, should_succeed: bool = True, should_reply: bool = True, failure_reason: str = "Out of stock"):
        self.should_succeed = should_succeed
        self.should_reply = should_reply
        self.failure_reason = failure_reason

    def start(self) -> "FakeWarehouse":
        self.subscription = self.bus.listen(self.channel, self.on_command)
        return self

    def stop(self) -> None:
        if self.subscription is not None:
            self.bus.unsubscribe(self.subscription)
            self.subscription = None

    async def on_command(self, message: str) -> None:
        command = FillOrderCommand.model_validate_json(message)
        self.commands.append(command)
        if not self.should_reply:
            return

        external_id = command.event_data.command_args.external_id
        if self.should_succeed:
            reply = OrderFilled(event_data=OrderFilledData(warehouse_addr=self.warehouse_addr, external_id=external_id))
        else:
            reply = OrderFilled(
                event_name=ORDER_BACKORDERED,
                event_data=OrderFilledData(external_id=external_id, reason=self.failure_reason),
            )
        await self.bus.notify(command.event_data.reply_channel, reply.to_json())
