"""Address validator factory.

Uses FakeAddressValidator by default. Configure via the ADDRESS_ADAPTER
environment variable.
"""

import os

from ordering.address.port import AddressValidator

_current_validator: AddressValidator | None = None


def get_address_validator() -> AddressValidator:
    """Return the configured address validator (singleton)."""
    global _current_validator
    if _current_validator is None:
        adapter = os.environ.get("ADDRESS_ADAPTER", "fake")
        if adapter == "fake":
            from ordering.address.fake_adapter import FakeAddressValidator

            _current_validator = FakeAddressValidator()
        else:
            raise ValueError(f"Unknown address adapter: {adapter}")
    return _current_validator


def set_address_validator(validator: AddressValidator) -> None:
    """Override the active address validator (useful for tests)."""
    global _current_validator
    _current_validator = validator


def reset_address_validator() -> None:
    """Reset the address validator singleton."""
    global _current_validator
    _current_validator = None
