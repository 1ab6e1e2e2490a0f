"""Order application service: load, update through the pipeline, save, dispatch.

Every operation reads the latest snapshot from the repository, applies the
change through the ordering pipeline and saves the result. Creation and
every accepted status change then dispatch the order workflow, whose
follow-up updates come back through :meth:`OrderService.update_order`.
"""

from collections.abc import Mapping

import structlog

from modeling.snapshot import Snapshot

from ordering.order.order import (
    ORDER_NO,
    ORDER_STATUS,
    ORDER_TOTAL,
    OrderStatus,
    create_order,
    ready_to_delete,
    update_order,
)
from ordering.order.repository import InMemoryOrderRepository, OrderRepository
from ordering.order.workflow import OrderPorts, OrderWorkflow

logger = structlog.get_logger(__name__)


class OrderService:
    def __init__(self, repository: OrderRepository | None = None, ports: OrderPorts | None = None) -> None:
        self.repository = repository or InMemoryOrderRepository()
        self.workflow = OrderWorkflow(ports or OrderPorts.from_environment(), self.update_order)

    def find(self, order_no: str) -> Snapshot:
        return self.repository.find(order_no)

    async def create_order(self, **order_info) -> Snapshot:
        """Create and save a new order, then run its PENDING workflow.

        Returns the latest snapshot, including the results of address
        validation and payment authorization.
        """
        order = self.repository.save(create_order(**order_info))
        logger.info("Order created", order_no=order[ORDER_NO], order_total=order[ORDER_TOTAL])

        await self.workflow.dispatch(order)
        return self.repository.find(order[ORDER_NO])

    async def update_order(self, order_no: str, changes: Mapping) -> Snapshot:
        current = self.repository.find(order_no)
        updated = self.repository.save(update_order(current, changes))

        if updated[ORDER_STATUS] != current[ORDER_STATUS]:
            logger.info(
                "Order status changed",
                order_no=order_no,
                from_status=current[ORDER_STATUS],
                to_status=updated[ORDER_STATUS],
            )
            await self.workflow.dispatch(updated)
        return updated

    async def submit_order(self, order_no: str) -> Snapshot:
        """Approve a PENDING order, which starts fulfillment."""
        await self.update_order(order_no, {ORDER_STATUS: OrderStatus.APPROVED.value})
        return self.repository.find(order_no)

    async def cancel_order(self, order_no: str) -> Snapshot:
        await self.update_order(order_no, {ORDER_STATUS: OrderStatus.CANCELED.value})
        return self.repository.find(order_no)

    async def delete_order(self, order_no: str) -> None:
        order = ready_to_delete(self.repository.find(order_no))
        self.repository.delete(order[ORDER_NO])
        logger.info("Order deleted", order_no=order_no, status=order[ORDER_STATUS])
