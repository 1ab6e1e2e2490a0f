"""Order workflow: the asynchronous work triggered by each order status.

Whenever an order is created or its status changes, ``OrderWorkflow.dispatch``
runs exactly one step for the new status:

    PENDING   validate the shipping address and authorize payment, concurrently
    APPROVED  fill the order at a warehouse, record the pickup address, ship it
    SHIPPING  subscribe to tracking; on delivery verify it, capture payment and
              complete the order
    CANCELED  refund the payment
    COMPLETE  nothing external

Steps never change an order directly. Each result is applied as a follow-up
update through ``apply_update`` (normally ``OrderService.update_order``),
which runs the full guard pipeline and may dispatch the next status in turn.
Follow-ups only carry the fields their step owns, so concurrent follow-ups
for the same order commute.

A collaborator failure, or a follow-up rejected by the guards, is logged with
the step name and raised as WorkflowStepError. The two PENDING steps always
both run to the end; if both fail, their errors are raised together as an
ExceptionGroup.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass

import structlog

from modeling.exceptions import WorkflowStepError
from modeling.snapshot import Snapshot
from ordering.address import get_address_validator
from ordering.address.port import AddressValidator
from ordering.carrier import get_carrier
from ordering.carrier.port import ShippingCarrier
from ordering.inventory import get_inventory
from ordering.inventory.port import InventoryService
from ordering.payment import get_gateway
from ordering.payment.port import PaymentGateway
from shared.events.fulfillment import TrackingEvent
from shared.logging import order_context

from ordering.order.order import (
    BILLING_ADDRESS,
    CREDIT_CARD_NUMBER,
    CUSTOMER_INFO,
    ORDER_ITEMS,
    ORDER_NO,
    ORDER_STATUS,
    ORDER_TOTAL,
    PAYMENT_AUTHORIZATION,
    PICKUP_ADDRESS,
    PROOF_OF_DELIVERY,
    SHIPMENT_ID,
    SHIPPING_ADDRESS,
    SIGNATURE_REQUIRED,
    OrderStatus,
)

logger = structlog.get_logger(__name__)

ApplyUpdate = Callable[[str, Mapping], Awaitable[Snapshot]]


class CollaboratorRejected(Exception):
    """A collaborator answered the request but declined it."""


@dataclass
class OrderPorts:
    """The external collaborators an order workflow talks to."""

    address: AddressValidator
    payment: PaymentGateway
    carrier: ShippingCarrier
    inventory: InventoryService

    @classmethod
    def from_environment(cls) -> "OrderPorts":
        return cls(
            address=get_address_validator(),
            payment=get_gateway(),
            carrier=get_carrier(),
            inventory=get_inventory(),
        )


class OrderWorkflow:
    def __init__(self, ports: OrderPorts, apply_update: ApplyUpdate) -> None:
        self.ports = ports
        self.apply_update = apply_update
        self.handlers: dict[OrderStatus, Callable[[Snapshot], Awaitable[None]]] = {
            OrderStatus.PENDING: self.on_pending,
            OrderStatus.APPROVED: self.on_approved,
            OrderStatus.SHIPPING: self.on_shipping,
            OrderStatus.COMPLETE: self.on_complete,
            OrderStatus.CANCELED: self.on_canceled,
        }

    async def dispatch(self, order: Snapshot) -> None:
        status = OrderStatus(order[ORDER_STATUS])
        with order_context(order[ORDER_NO], status=status.value):
            logger.info("Dispatching order workflow")
            await self.handlers[status](order)

    @asynccontextmanager
    async def step(self, name: str, order: Snapshot):
        try:
            yield
        except WorkflowStepError:
            raise
        except Exception as exc:
            logger.error(
                "Workflow step failed",
                step=name,
                order_no=order.get(ORDER_NO),
                status=order.get(ORDER_STATUS),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise WorkflowStepError(name, exc) from exc

    # -------------------------------------------------------------------
    # PENDING
    # -------------------------------------------------------------------
    async def on_pending(self, order: Snapshot) -> None:
        results = await asyncio.gather(
            self.validate_address(order),
            self.authorize_payment(order),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if len(failures) == 1:
            raise failures[0]
        if failures:
            raise BaseExceptionGroup("pending order steps failed", failures)

    async def validate_address(self, order: Snapshot) -> None:
        async with self.step("validate_address", order):
            result = await self.ports.address.validate_address(order[SHIPPING_ADDRESS])
            if not result.valid:
                raise CollaboratorRejected(result.failure_reason)
            await self.apply_update(order[ORDER_NO], {SHIPPING_ADDRESS: result.address})

    async def authorize_payment(self, order: Snapshot) -> None:
        async with self.step("authorize_payment", order):
            result = await self.ports.payment.authorize_payment(
                order[CUSTOMER_INFO],
                order[CREDIT_CARD_NUMBER],
                order[BILLING_ADDRESS],
                order[ORDER_TOTAL],
            )
            if not result.success:
                raise CollaboratorRejected(result.failure_reason)
            await self.apply_update(order[ORDER_NO], {PAYMENT_AUTHORIZATION: result.authorization_id})

    # -------------------------------------------------------------------
    # APPROVED
    # -------------------------------------------------------------------
    async def on_approved(self, order: Snapshot) -> None:
        async with self.step("fill_order", order):
            filled = await self.ports.inventory.fill_order(order[ORDER_NO], order[ORDER_ITEMS])
            if not filled.success:
                raise CollaboratorRejected(filled.failure_reason)
            order = await self.apply_update(order[ORDER_NO], {PICKUP_ADDRESS: filled.pickup_address})

        async with self.step("ship_order", order):
            shipment = await self.ports.carrier.ship_order(
                order[ORDER_NO],
                order[PICKUP_ADDRESS],
                order[SHIPPING_ADDRESS],
                bool(order.get(SIGNATURE_REQUIRED)),
            )
            if not shipment.success:
                raise CollaboratorRejected(shipment.failure_reason)
            await self.apply_update(
                order[ORDER_NO],
                {SHIPMENT_ID: shipment.shipment_id, ORDER_STATUS: OrderStatus.SHIPPING.value},
            )

    # -------------------------------------------------------------------
    # SHIPPING
    # -------------------------------------------------------------------
    async def on_shipping(self, order: Snapshot) -> None:
        async def on_tracking_event(event: TrackingEvent) -> None:
            if not event.delivered:
                logger.debug("Shipment update", order_no=event.order_no, status=event.status.value)
                return
            await self.complete_delivery(order)

        async with self.step("track_shipment", order):
            await self.ports.carrier.track_shipment(order[SHIPMENT_ID], order[ORDER_NO], on_tracking_event)

    async def complete_delivery(self, order: Snapshot) -> None:
        async with self.step("verify_delivery", order):
            delivery = await self.ports.carrier.verify_delivery(order[SHIPMENT_ID], bool(order.get(SIGNATURE_REQUIRED)))
            if not delivery.verified:
                raise CollaboratorRejected(delivery.failure_reason)

        async with self.step("complete_payment", order):
            payment = await self.ports.payment.complete_payment(order[PAYMENT_AUTHORIZATION], order[ORDER_TOTAL])
            if not payment.success:
                raise CollaboratorRejected(payment.failure_reason)
            await self.apply_update(
                order[ORDER_NO],
                {PROOF_OF_DELIVERY: delivery.proof_of_delivery, ORDER_STATUS: OrderStatus.COMPLETE.value},
            )

    # -------------------------------------------------------------------
    # Final statuses
    # -------------------------------------------------------------------
    async def on_canceled(self, order: Snapshot) -> None:
        if not order.get(PAYMENT_AUTHORIZATION):
            logger.info("Canceled order has no payment to refund", order_no=order[ORDER_NO])
            return

        async with self.step("refund_payment", order):
            refund = await self.ports.payment.refund_payment(order[PAYMENT_AUTHORIZATION], order[ORDER_TOTAL])
            if not refund.success:
                raise CollaboratorRejected(refund.failure_reason)
            logger.info("Payment refunded", order_no=order[ORDER_NO], transaction_id=refund.transaction_id)

    async def on_complete(self, order: Snapshot) -> None:
        logger.info(
            "Order complete",
            order_no=order[ORDER_NO],
            order_total=order[ORDER_TOTAL],
        )
