"""Tests for the order workflow — one step per status, driven through the service."""

import pytest
from modeling.exceptions import WorkflowStepError
from ordering.inventory.fake_adapter import DEFAULT_WAREHOUSE
from ordering.order.order import OrderStatus
from ordering.order.workflow import CollaboratorRejected, OrderWorkflow
from shared.events.fulfillment import TrackingStatus

pytestmark = pytest.mark.asyncio


async def _shipping_order(service, order_info, **overrides):
    order = await service.create_order(**{**order_info, **overrides})
    return await service.submit_order(order["order_no"])


class TestDispatchTable:
    async def test_every_status_has_a_handler(self, ports):
        async def apply_update(order_no, changes):
            raise AssertionError("not expected")

        workflow = OrderWorkflow(ports, apply_update)
        assert set(workflow.handlers) == set(OrderStatus)


class TestPending:
    async def test_create_order_scenario(self, service, order_info):
        order = await service.create_order(**order_info)

        assert order["order_total"] == pytest.approx(177.82)
        assert order["order_status"] == OrderStatus.PENDING.value

    async def test_address_is_normalized_and_payment_authorized(self, service, ports, order_info):
        order = await service.create_order(**order_info)

        assert order["shipping_address"] == "12 ANALYTICAL ROW, LONDON"
        assert order["payment_authorization"].startswith("fake_auth_")
        (call,) = ports.payment.calls_to("authorize_payment")
        assert call["amount"] == pytest.approx(177.82)
        assert call["last4"] == "1111"

    async def test_declined_card(self, service, ports, order_info):
        ports.payment.configure(should_succeed=False, failure_reason="Insufficient funds")

        with pytest.raises(WorkflowStepError) as exc:
            await service.create_order(**order_info)

        assert exc.value.step == "authorize_payment"
        assert isinstance(exc.value.cause, CollaboratorRejected)
        assert "Insufficient funds" in str(exc.value)

    async def test_unknown_address(self, service, ports, order_info):
        ports.address.configure(should_succeed=False)

        with pytest.raises(WorkflowStepError) as exc:
            await service.create_order(**order_info)
        assert exc.value.step == "validate_address"

    async def test_address_and_payment_both_fail(self, service, ports, order_info):
        ports.address.configure(should_succeed=False)
        ports.payment.configure(should_succeed=False, failure_reason="Insufficient funds")

        with pytest.raises(ExceptionGroup) as exc:
            await service.create_order(order_no="ord-001", **order_info)

        errors = exc.value.exceptions
        assert all(isinstance(error, WorkflowStepError) for error in errors)
        assert sorted(error.step for error in errors) == ["authorize_payment", "validate_address"]
        assert service.find("ord-001")["order_status"] == OrderStatus.PENDING.value

    async def test_address_update_finishes_when_payment_fails(self, service, ports, order_info):
        ports.payment.configure(should_succeed=False)

        with pytest.raises(WorkflowStepError):
            await service.create_order(order_no="ord-001", **order_info)

        assert service.find("ord-001")["shipping_address"] == "12 ANALYTICAL ROW, LONDON"

    async def test_failed_order_is_still_saved(self, service, ports, order_info):
        ports.payment.configure(should_succeed=False)

        with pytest.raises(WorkflowStepError):
            await service.create_order(order_no="ord-001", **order_info)

        order = service.find("ord-001")
        assert order["order_status"] == OrderStatus.PENDING.value
        assert order["payment_authorization"] is None


class TestApproved:
    async def test_submit_fills_and_ships(self, service, ports, order_info):
        order = await _shipping_order(service, order_info)

        assert order["order_status"] == OrderStatus.SHIPPING.value
        assert order["pickup_address"] == DEFAULT_WAREHOUSE
        assert order["shipment_id"] in ports.carrier.shipments
        assert order["shipment_id"] in ports.carrier.subscribers

    async def test_shipment_uses_pickup_and_shipping_addresses(self, service, ports, order_info):
        order = await _shipping_order(service, order_info, signature_required=True)

        shipment = ports.carrier.shipments[order["shipment_id"]]
        assert shipment["pickup_address"] == DEFAULT_WAREHOUSE
        assert shipment["shipping_address"] == order["shipping_address"]
        assert shipment["signature_required"] is True

    async def test_backordered(self, service, ports, order_info):
        ports.inventory.configure(should_succeed=False, failure_reason="Backordered")
        order = await service.create_order(**order_info)

        with pytest.raises(WorkflowStepError) as exc:
            await service.submit_order(order["order_no"])

        assert exc.value.step == "fill_order"
        assert service.find(order["order_no"])["order_status"] == OrderStatus.APPROVED.value

    async def test_carrier_unavailable(self, service, ports, order_info):
        ports.carrier.configure(should_succeed=False)
        order = await service.create_order(**order_info)

        with pytest.raises(WorkflowStepError) as exc:
            await service.submit_order(order["order_no"])

        assert exc.value.step == "ship_order"
        assert service.find(order["order_no"])["pickup_address"] == DEFAULT_WAREHOUSE


class TestShipping:
    async def test_delivery_completes_order(self, service, ports, order_info):
        order = await _shipping_order(service, order_info)

        await ports.carrier.report(order["shipment_id"])

        completed = service.find(order["order_no"])
        assert completed["order_status"] == OrderStatus.COMPLETE.value
        assert completed["proof_of_delivery"] == f"photo-{order['shipment_id']}"
        (capture,) = ports.payment.calls_to("complete_payment")
        assert capture["authorization_id"] == order["payment_authorization"]

    async def test_signature_proof(self, service, ports, order_info):
        order = await _shipping_order(service, order_info, signature_required=True)

        await ports.carrier.report(order["shipment_id"])

        assert service.find(order["order_no"])["proof_of_delivery"] == f"signature-{order['shipment_id']}"

    async def test_in_transit_is_informational(self, service, ports, order_info):
        order = await _shipping_order(service, order_info)

        await ports.carrier.report(order["shipment_id"], TrackingStatus.IN_TRANSIT)

        assert service.find(order["order_no"])["order_status"] == OrderStatus.SHIPPING.value
        assert ports.payment.calls_to("complete_payment") == []

    async def test_capture_declined(self, service, ports, order_info):
        order = await _shipping_order(service, order_info)
        ports.payment.configure(should_succeed=False)

        with pytest.raises(WorkflowStepError) as exc:
            await ports.carrier.report(order["shipment_id"])

        assert exc.value.step == "complete_payment"
        assert service.find(order["order_no"])["order_status"] == OrderStatus.SHIPPING.value


class TestCanceled:
    async def test_cancel_refunds_authorization(self, service, ports, order_info):
        order = await service.create_order(**order_info)

        canceled = await service.cancel_order(order["order_no"])

        assert canceled["order_status"] == OrderStatus.CANCELED.value
        (refund,) = ports.payment.calls_to("refund_payment")
        assert refund["authorization_id"] == order["payment_authorization"]
        assert refund["amount"] == pytest.approx(177.82)

    async def test_cancel_without_authorization(self, service, ports, order_info):
        ports.payment.configure(should_succeed=False)
        with pytest.raises(WorkflowStepError):
            await service.create_order(order_no="ord-002", **order_info)
        ports.payment.configure(should_succeed=True)

        await service.cancel_order("ord-002")

        assert ports.payment.calls_to("refund_payment") == []

    async def test_refund_declined(self, service, ports, order_info):
        order = await service.create_order(**order_info)
        ports.payment.configure(should_succeed=False)

        with pytest.raises(WorkflowStepError) as exc:
            await service.cancel_order(order["order_no"])
        assert exc.value.step == "refund_payment"
