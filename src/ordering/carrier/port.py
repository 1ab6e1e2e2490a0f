"""Carrier port: abstract interface for shipping carrier integrations.

All carrier adapters must implement this interface. The ordering workflow
programs against the port; adapters are swapped via configuration.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from shared.events.fulfillment import TrackingEvent

TrackingCallback = Callable[[TrackingEvent], Awaitable[None]]


@dataclass(frozen=True)
class ShipmentResult:
    success: bool
    shipment_id: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class DeliveryResult:
    verified: bool
    proof_of_delivery: str | None = None
    failure_reason: str | None = None


class ShippingCarrier(ABC):
    """Abstract interface for carrier adapters."""

    @abstractmethod
    async def ship_order(
        self,
        order_no: str,
        pickup_address: str,
        shipping_address: str,
        signature_required: bool = False,
    ) -> ShipmentResult:
        """Book a pickup at ``pickup_address`` for delivery to ``shipping_address``."""
        ...

    @abstractmethod
    async def track_shipment(self, shipment_id: str, order_no: str, callback: TrackingCallback) -> None:
        """Subscribe ``callback`` to tracking events for a shipment."""
        ...

    @abstractmethod
    async def verify_delivery(self, shipment_id: str, signature_required: bool = False) -> DeliveryResult:
        """Confirm delivery and return the proof of delivery."""
        ...
