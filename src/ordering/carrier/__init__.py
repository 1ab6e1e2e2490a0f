"""Shipping carrier factory.

Uses FakeCarrier by default. Configure via the CARRIER_ADAPTER environment
variable; tests drive deliveries through ``FakeCarrier.report``.
"""

import os

from ordering.carrier.port import ShippingCarrier

_current_carrier: ShippingCarrier | None = None


def get_carrier() -> ShippingCarrier:
    """Return the configured carrier (singleton)."""
    global _current_carrier
    if _current_carrier is None:
        adapter = os.environ.get("CARRIER_ADAPTER", "fake")
        if adapter == "fake":
            from ordering.carrier.fake_adapter import FakeCarrier

            _current_carrier = FakeCarrier()
        else:
            raise ValueError(f"Unknown carrier adapter: {adapter}")
    return _current_carrier


def set_carrier(carrier: ShippingCarrier) -> None:
    """Override the active carrier (useful for tests)."""
    global _current_carrier
    _current_carrier = carrier


def reset_carrier() -> None:
    """Reset the carrier singleton."""
    global _current_carrier
    _current_carrier = None
