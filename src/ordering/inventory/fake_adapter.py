"""Fake inventory adapter that answers fill requests directly."""

from collections.abc import Sequence

from ordering.inventory.port import FillResult, InventoryService

DEFAULT_WAREHOUSE = "1 Warehouse Way, Reno, NV 89501"


class FakeInventory(InventoryService):
    def __init__(self, warehouse_addr: str = DEFAULT_WAREHOUSE) -> None:
        self.warehouse_addr = warehouse_addr
        self.should_succeed = True
        self.failure_reason = "Out of stock"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Out of stock") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def fill_order(self, order_no: str, order_items: Sequence[dict]) -> FillResult:
        self.calls.append({"order_no": order_no, "order_items": list(order_items)})
        if not self.should_succeed:
            return FillResult(success=False, failure_reason=self.failure_reason)
        return FillResult(success=True, pickup_address=self.warehouse_addr)
