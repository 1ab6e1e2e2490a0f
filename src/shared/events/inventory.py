"""Cross-service message contracts exchanged with the Inventory service.

The order service asks a warehouse to fill an order by publishing a
FillOrderCommand on the inventory channel, and waits for an OrderFilled reply
on its own channel. Field names on the wire are camelCase; Python code uses
the snake_case attribute names.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

INVENTORY_CHANNEL = "inventoryChannel"
ORDER_CHANNEL = "orderChannel"

ORDER_FILLED = "orderFilled"
ORDER_BACKORDERED = "orderBackordered"


class _Message(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class LineItem(_Message):
    item_id: str
    price: float


class FillOrderArgs(_Message):
    line_items: list[LineItem]
    external_id: str


class FillOrderData(_Message):
    reply_channel: str = ORDER_CHANNEL
    command_name: str = "fillOrder"
    command_args: FillOrderArgs


class FillOrderCommand(_Message):
    """Ask the inventory service to pick the order's items."""

    event_type: str = "Command"
    event_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    event_source: str = "orderService"
    event_data: FillOrderData


class OrderFilledData(BaseModel):
    warehouse_addr: str | None = None
    external_id: str | None = Field(default=None, alias="externalId")
    reason: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class OrderFilled(_Message):
    """Reply from the inventory service: filled, or backordered with a reason."""

    event_name: str = ORDER_FILLED
    event_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    event_data: OrderFilledData

    @property
    def filled(self) -> bool:
        return self.event_name == ORDER_FILLED and bool(self.event_data.warehouse_addr)
