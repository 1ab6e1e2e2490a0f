import pytest
from ordering.address.fake_adapter import FakeAddressValidator
from ordering.carrier.fake_adapter import FakeCarrier
from ordering.inventory.fake_adapter import FakeInventory
from ordering.order.repository import InMemoryOrderRepository
from ordering.order.service import OrderService
from ordering.order.workflow import OrderPorts
from ordering.payment.fake_adapter import FakePaymentGateway

CARD = "4111111111111111"


@pytest.fixture
def order_info():
    return {
        "customer_info": {"customer_id": "cust-001", "name": "Ada Lovelace"},
        "order_items": [
            {"item_id": "item1", "price": 90.22},
            {"item_id": "item2", "price": 87.60},
        ],
        "shipping_address": "12 Analytical Row, London",
        "billing_address": "12 Analytical Row, London",
        "credit_card_number": CARD,
    }


@pytest.fixture
def ports():
    return OrderPorts(
        address=FakeAddressValidator(),
        payment=FakePaymentGateway(),
        carrier=FakeCarrier(),
        inventory=FakeInventory(),
    )


@pytest.fixture
def service(ports):
    return OrderService(repository=InMemoryOrderRepository(), ports=ports)
