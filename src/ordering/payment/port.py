"""Payment gateway port (abstract interface).

Defines the contract that all payment adapters must implement. The order
workflow authorizes the order total when an order is placed, captures it once
delivery is verified, and refunds it when the order is canceled.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthorizationResult:
    """Result of a payment authorization attempt."""

    success: bool
    authorization_id: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class PaymentResult:
    """Result of a capture or refund against an authorization."""

    success: bool
    transaction_id: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    async def authorize_payment(
        self,
        customer_info,
        credit_card_number: str,
        billing_address: str,
        amount: float,
    ) -> AuthorizationResult:
        """Place a hold for ``amount`` on the card."""
        ...

    @abstractmethod
    async def complete_payment(self, authorization_id: str, amount: float) -> PaymentResult:
        """Capture a previously authorized amount."""
        ...

    @abstractmethod
    async def refund_payment(self, authorization_id: str, amount: float) -> PaymentResult:
        """Release or refund a previously authorized amount."""
        ...
