"""Address validation port (abstract interface)."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AddressResult:
    """Result of an address validation request."""

    valid: bool
    address: str | None = None
    failure_reason: str | None = None


class AddressValidator(ABC):
    """Abstract address validation interface."""

    @abstractmethod
    async def validate_address(self, address: str) -> AddressResult:
        """Validate and normalize a shipping address."""
        ...
