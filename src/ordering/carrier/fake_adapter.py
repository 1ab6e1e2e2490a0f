"""Fake carrier adapter: deterministic carrier for testing and development.

Generates mock shipment ids and proofs of delivery. Tracking subscribers are
kept in memory; tests drive them with :meth:`FakeCarrier.report`.
"""

from uuid import uuid4

from ordering.carrier.port import DeliveryResult, ShipmentResult, ShippingCarrier, TrackingCallback
from shared.events.fulfillment import TrackingEvent, TrackingStatus


class FakeCarrier(ShippingCarrier):
    """Fake carrier that always succeeds by default."""

    def __init__(self) -> None:
        self.should_succeed = True
        self.failure_reason = "Carrier unavailable"
        self.subscribers: dict[str, tuple[str, TrackingCallback]] = {}
        self.shipments: dict[str, dict] = {}

    def configure(self, should_succeed: bool = True, failure_reason: str = "Carrier unavailable") -> None:
        """Configure the fake carrier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def ship_order(
        self,
        order_no: str,
        pickup_address: str,
        shipping_address: str,
        signature_required: bool = False,
    ) -> ShipmentResult:
        if not self.should_succeed:
            return ShipmentResult(success=False, failure_reason=self.failure_reason)

        shipment_id = f"ship-{uuid4().hex[:8]}"
        self.shipments[shipment_id] = {
            "order_no": order_no,
            "pickup_address": pickup_address,
            "shipping_address": shipping_address,
            "signature_required": signature_required,
        }
        return ShipmentResult(success=True, shipment_id=shipment_id)

    async def track_shipment(self, shipment_id: str, order_no: str, callback: TrackingCallback) -> None:
        self.subscribers[shipment_id] = (order_no, callback)

    async def report(self, shipment_id: str, status: TrackingStatus = TrackingStatus.DELIVERED) -> None:
        """Push a tracking event to the shipment's subscriber."""
        order_no, callback = self.subscribers[shipment_id]
        await callback(TrackingEvent(shipment_id=shipment_id, order_no=order_no, status=status))

    async def verify_delivery(self, shipment_id: str, signature_required: bool = False) -> DeliveryResult:
        if not self.should_succeed:
            return DeliveryResult(verified=False, failure_reason=self.failure_reason)
        kind = "signature" if signature_required else "photo"
        return DeliveryResult(verified=True, proof_of_delivery=f"{kind}-{shipment_id}")
