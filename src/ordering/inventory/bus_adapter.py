"""Inventory adapter that fills orders over the event bus.

The adapter first subscribes to replies on the order channel that mention the
order number, and only then publishes a fillOrder command on the inventory
channel, so a fast reply cannot be missed. The bus filter is only a substring
match, so replies whose externalId is another order are skipped. The first
matching reply settles the request and the subscription is removed; no reply
within ``timeout`` seconds is reported as a failure.
"""

import asyncio
from collections.abc import Sequence

import structlog

from ordering.inventory.port import FillResult, InventoryService
from shared.bus.port import EventBus
from shared.events.inventory import (
    INVENTORY_CHANNEL,
    ORDER_CHANNEL,
    FillOrderArgs,
    FillOrderCommand,
    FillOrderData,
    LineItem,
    OrderFilled,
)

logger = structlog.get_logger(__name__)


class EventBusInventory(InventoryService):
    def __init__(
        self,
        bus: EventBus,
        timeout: float = 30.0,
        reply_channel: str = ORDER_CHANNEL,
        command_channel: str = INVENTORY_CHANNEL,
    ) -> None:
        self.bus = bus
        self.timeout = timeout
        self.reply_channel = reply_channel
        self.command_channel = command_channel

    async def fill_order(self, order_no: str, order_items: Sequence[dict]) -> FillResult:
        reply: asyncio.Future = asyncio.get_running_loop().create_future()

        async def on_reply(message: str) -> None:
            event = OrderFilled.model_validate_json(message)
            if event.event_data.external_id != order_no:
                logger.debug("Ignoring inventory reply", order_no=order_no, external_id=event.event_data.external_id)
                return
            logger.info("Inventory reply received", order_no=order_no, event_name=event.event_name)
            if not reply.done():
                reply.set_result(event)

        subscription = self.bus.listen(self.reply_channel, on_reply, filter=order_no)

        command = FillOrderCommand(
            event_data=FillOrderData(
                reply_channel=self.reply_channel,
                command_args=FillOrderArgs(
                    line_items=[LineItem(**item) for item in order_items],
                    external_id=order_no,
                ),
            )
        )
        await self.bus.notify(self.command_channel, command.to_json())

        try:
            event = await asyncio.wait_for(reply, timeout=self.timeout)
        except TimeoutError:
            return FillResult(success=False, failure_reason=f"No inventory reply within {self.timeout}s")
        finally:
            self.bus.unsubscribe(subscription)

        if event.filled:
            return FillResult(success=True, pickup_address=event.event_data.warehouse_addr)
        return FillResult(success=False, failure_reason=event.event_data.reason or event.event_name)
