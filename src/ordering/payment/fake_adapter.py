"""Configurable fake payment gateway for development and testing.

Simulates a card processor without any external calls. It can be configured
at runtime to succeed or fail, and records every call it receives.
"""

from uuid import uuid4

from ordering.payment.port import AuthorizationResult, PaymentGateway, PaymentResult


class FakePaymentGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def calls_to(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    async def authorize_payment(
        self,
        customer_info,
        credit_card_number: str,
        billing_address: str,
        amount: float,
    ) -> AuthorizationResult:
        self.calls.append(
            {
                "method": "authorize_payment",
                "customer_info": customer_info,
                "last4": credit_card_number[-4:] if credit_card_number else None,
                "billing_address": billing_address,
                "amount": amount,
            }
        )
        if self.should_succeed:
            return AuthorizationResult(success=True, authorization_id=f"fake_auth_{uuid4().hex[:12]}")
        return AuthorizationResult(success=False, failure_reason=self.failure_reason)

    async def complete_payment(self, authorization_id: str, amount: float) -> PaymentResult:
        self.calls.append({"method": "complete_payment", "authorization_id": authorization_id, "amount": amount})
        if self.should_succeed:
            return PaymentResult(success=True, transaction_id=f"fake_txn_{uuid4().hex[:12]}")
        return PaymentResult(success=False, failure_reason=self.failure_reason)

    async def refund_payment(self, authorization_id: str, amount: float) -> PaymentResult:
        self.calls.append({"method": "refund_payment", "authorization_id": authorization_id, "amount": amount})
        if self.should_succeed:
            return PaymentResult(success=True, transaction_id=f"fake_ref_{uuid4().hex[:12]}")
        return PaymentResult(success=False, failure_reason=self.failure_reason)
