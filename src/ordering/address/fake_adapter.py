"""Configurable fake address validator for development and testing.

Normalizes whitespace and upper-cases the address, or rejects it when
configured to fail.
"""

from ordering.address.port import AddressResult, AddressValidator


class FakeAddressValidator(AddressValidator):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Address not found"
        self.calls: list[str] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Address not found") -> None:
        """Configure validator behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def validate_address(self, address: str) -> AddressResult:
        self.calls.append(address)
        if not self.should_succeed:
            return AddressResult(valid=False, failure_reason=self.failure_reason)
        return AddressResult(valid=True, address=" ".join(address.split()).upper())
