"""Order model, the core of the ordering domain.

An order is an immutable snapshot. Every change goes through the ``ordering``
update pipeline, which enforces the guards configured below:

- required fields, with proof of delivery required only to complete,
- fields frozen for good, or once the order leaves PENDING, or once it is
  complete or canceled,
- order total recomputed whenever the items change,
- allowed fields only,
- status, total and card number validated after the merge.

State Machine:
    PENDING → APPROVED → SHIPPING → COMPLETE
    any non-terminal state → CANCELED

Only the edges listed in ``_ILLEGAL_TRANSITIONS`` are rejected; every other
move, including keeping the same status, is accepted. Legality is always
judged against the status of the previous snapshot.
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from uuid import uuid4

from modeling.exceptions import (
    InvalidStatusChangeError,
    MissingPropertyError,
    OrderNotReadyError,
    ValidationError,
)
from modeling.guards import (
    RegEx,
    UpdaterSpec,
    ValidationSpec,
    allow,
    derive,
    freeze,
    require,
    validate,
)
from modeling.pipeline import ModelSpec
from modeling.policy import PERSONAL_INFO
from modeling.snapshot import Snapshot

from ordering.domain import ordering

MAX_ORDER = 99999.99

# Field names
ORDER_ITEMS = "order_items"
CUSTOMER_INFO = "customer_info"
SHIPPING_ADDRESS = "shipping_address"
BILLING_ADDRESS = "billing_address"
PROOF_OF_DELIVERY = "proof_of_delivery"
CREDIT_CARD_NUMBER = "credit_card_number"
PAYMENT_AUTHORIZATION = "payment_authorization"
SIGNATURE_REQUIRED = "signature_required"
ORDER_STATUS = "order_status"
ORDER_TOTAL = "order_total"
ORDER_NO = "order_no"
PICKUP_ADDRESS = "pickup_address"
SHIPMENT_ID = "shipment_id"

ORDER_FIELDS = (
    ORDER_ITEMS,
    CUSTOMER_INFO,
    SHIPPING_ADDRESS,
    BILLING_ADDRESS,
    PROOF_OF_DELIVERY,
    CREDIT_CARD_NUMBER,
    PAYMENT_AUTHORIZATION,
    SIGNATURE_REQUIRED,
    ORDER_STATUS,
    ORDER_TOTAL,
    PICKUP_ADDRESS,
    SHIPMENT_ID,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    SHIPPING = "SHIPPING"
    COMPLETE = "COMPLETE"
    CANCELED = "CANCELED"


_FINAL_STATUSES = {OrderStatus.COMPLETE.value, OrderStatus.CANCELED.value}

# (previous status, proposed status)
_ILLEGAL_TRANSITIONS = frozenset(
    (from_status.value, to_status.value)
    for from_status, to_status in [
        (OrderStatus.APPROVED, OrderStatus.PENDING),
        (OrderStatus.SHIPPING, OrderStatus.PENDING),
        (OrderStatus.SHIPPING, OrderStatus.APPROVED),
        (OrderStatus.PENDING, OrderStatus.SHIPPING),
        (OrderStatus.PENDING, OrderStatus.COMPLETE),
    ]
)


# ---------------------------------------------------------------------------
# Items and totals
# ---------------------------------------------------------------------------
def check_items(items) -> list[dict]:
    """Return ``items`` as a list, or fail if any item lacks an id or a numeric price."""
    if not items:
        raise MissingPropertyError([ORDER_ITEMS])

    item_list = list(items) if isinstance(items, list | tuple) else [items]
    if all(
        isinstance(item, Mapping)
        and item.get("item_id")
        and isinstance(item.get("price"), int | float)
        and not isinstance(item.get("price"), bool)
        for item in item_list
    ):
        return item_list
    raise ValidationError([ORDER_ITEMS])


def calc_total(items) -> float:
    return round(sum(item["price"] for item in check_items(items)), 2)


# ---------------------------------------------------------------------------
# Conditional keys
# ---------------------------------------------------------------------------
def _previous_status(order: Snapshot) -> str | None:
    previous = order.previous
    return previous.get(ORDER_STATUS) if previous is not None else None


def freeze_on_approval(prop_key: str):
    """No changes to ``prop_key`` once the order has left PENDING."""

    def frozen_once_approved(order):
        return prop_key if _previous_status(order) != OrderStatus.PENDING.value else None

    return frozen_once_approved


def freeze_on_completion(prop_key: str):
    """No changes to ``prop_key`` once the order is complete or canceled."""

    def frozen_once_final(order):
        return prop_key if _previous_status(order) in _FINAL_STATUSES else None

    return frozen_once_final


def required_for_completion(prop_key: str):
    """``prop_key`` must be set to move the order to COMPLETE."""

    def required_to_complete(order):
        return prop_key if order.get(ORDER_STATUS) == OrderStatus.COMPLETE.value else None

    return required_to_complete


def status_change_valid(order: Snapshot, status: str) -> bool:
    previous = _previous_status(order)
    if previous is None:
        return True
    if (previous, status) in _ILLEGAL_TRANSITIONS:
        raise InvalidStatusChangeError(ORDER_STATUS, previous, status)
    return True


# ---------------------------------------------------------------------------
# Model definition
# ---------------------------------------------------------------------------
Order = ordering.define(
    ModelSpec(
        name="order",
        policies=(PERSONAL_INFO,),
        mixins=(
            require(
                CUSTOMER_INFO,
                ORDER_ITEMS,
                CREDIT_CARD_NUMBER,
                SHIPPING_ADDRESS,
                BILLING_ADDRESS,
                required_for_completion(PROOF_OF_DELIVERY),
            ),
            freeze(
                CUSTOMER_INFO,
                ORDER_NO,
                ORDER_TOTAL,
                freeze_on_approval(ORDER_ITEMS),
                freeze_on_approval(CREDIT_CARD_NUMBER),
                freeze_on_approval(SHIPPING_ADDRESS),
                freeze_on_approval(BILLING_ADDRESS),
                freeze_on_completion(ORDER_STATUS),
            ),
            derive(
                UpdaterSpec(
                    ORDER_ITEMS,
                    lambda order, items: {ORDER_TOTAL: calc_total(items)},
                ),
            ),
            allow(*ORDER_FIELDS, reserved=(ORDER_NO,)),
            validate(
                ValidationSpec(
                    ORDER_STATUS,
                    is_valid=status_change_valid,
                    values=[status.value for status in OrderStatus],
                ),
                ValidationSpec(ORDER_TOTAL, maxnum=MAX_ORDER),
                ValidationSpec(CREDIT_CARD_NUMBER, regex="credit_card"),
            ),
        ),
    )
)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------
def create_order(
    customer_info=None,
    order_items: Sequence[dict] | None = None,
    shipping_address: str | None = None,
    billing_address: str | None = None,
    credit_card_number: str | None = None,
    signature_required: bool = False,
    order_no: str | None = None,
) -> Snapshot:
    """Create a new PENDING order.

    Args:
        customer_info: Customer reference placing the order.
        order_items: Non-empty list of dicts with ``item_id`` and ``price``.
        shipping_address: Where the order ships to.
        billing_address: Address on the card.
        credit_card_number: Card to authorize the total against.
        signature_required: Whether delivery needs a signature.
        order_no: Identifier to use; generated when omitted.
    """
    items = check_items(order_items)
    if credit_card_number and not RegEx.test("credit_card", credit_card_number):
        raise ValidationError(["credit_card"])

    return ordering.create(
        Order.name,
        {
            CUSTOMER_INFO: customer_info,
            ORDER_ITEMS: items,
            SHIPPING_ADDRESS: shipping_address,
            BILLING_ADDRESS: billing_address,
            CREDIT_CARD_NUMBER: credit_card_number,
            SIGNATURE_REQUIRED: signature_required,
            PAYMENT_AUTHORIZATION: None,
            PROOF_OF_DELIVERY: None,
            PICKUP_ADDRESS: None,
            SHIPMENT_ID: None,
            ORDER_TOTAL: calc_total(items),
            ORDER_STATUS: OrderStatus.PENDING.value,
            ORDER_NO: order_no or str(uuid4()),
        },
    )


def update_order(order: Snapshot, changes: Mapping) -> Snapshot:
    return ordering.process_update(order, changes)


def ready_to_delete(order: Snapshot) -> Snapshot:
    """Don't delete orders before they're complete or canceled."""
    if order.get(ORDER_STATUS) not in _FINAL_STATUSES:
        raise OrderNotReadyError(order.get(ORDER_NO), order.get(ORDER_STATUS))
    return order
