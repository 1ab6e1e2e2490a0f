"""Errors raised by guards, the update pipeline and the order workflow.

Guard failures are protean ``ValidationError``s: ``messages`` maps each field
name to a list of problems, the shape the API layer reports validation
failures in. ``str()`` gives a one-line summary naming the fields.
"""

from protean.exceptions import (
    ConfigurationError,
    InvalidOperationError,
    ObjectNotFoundError,
    ProteanException,
)
from protean.exceptions import ValidationError as ProteanValidationError


class ModelError(ProteanValidationError):
    """Base exception for all model update failures."""

    def __init__(self, message: str, messages: dict | None = None):
        self.message = message
        super().__init__(messages or {})

    def __str__(self) -> str:
        return self.message


class _PropertyError(ModelError):
    """An error about a list of property names."""

    prefix = "invalid properties"
    reason = "is invalid"

    def __init__(self, props):
        self.props = list(props)
        super().__init__(
            f"{self.prefix}: {', '.join(self.props)}",
            {prop: [self.reason] for prop in self.props},
        )


class MissingPropertyError(_PropertyError):
    """Raised when required properties are absent or empty."""

    prefix = "missing required properties"
    reason = "is required"


class ImmutablePropertyError(_PropertyError):
    """Raised when a change touches a frozen property."""

    prefix = "cannot update readonly properties"
    reason = "is read-only"


class UnknownPropertyError(_PropertyError):
    """Raised when a change names a property outside the allow-list."""

    prefix = "invalid properties"
    reason = "is not allowed"


class ValidationError(_PropertyError):
    """Raised when a property value fails one of its validation checks."""

    prefix = "invalid value for"
    reason = "is invalid"


class InvalidStatusChangeError(ValidationError):
    """Raised when a status moves along an illegal edge."""

    def __init__(self, prop: str, from_status, to_status):
        self.from_status = from_status
        self.to_status = to_status
        self.props = [prop]
        ModelError.__init__(
            self,
            f"invalid status change: {from_status} -> {to_status}",
            {prop: [f"{from_status} -> {to_status} is not a permitted status change"]},
        )


class InvalidMixinPhase(ConfigurationError):
    """Raised when a mixin is attached to an unknown phase."""

    def __init__(self, phase):
        self.phase = phase
        super().__init__(f"invalid mixin phase: {phase!r}")


class OrderNotReadyError(InvalidOperationError):
    """Raised when deleting an order that is still in progress."""

    def __init__(self, order_no, status):
        self.order_no = order_no
        self.status = status
        super().__init__("order status incomplete")


class OrderNotFoundError(ObjectNotFoundError):
    def __init__(self, order_no: str):
        self.order_no = order_no
        super().__init__(f"order not found: {order_no}")


class WorkflowStepError(ProteanException):
    """Wraps any collaborator failure raised while running a workflow step."""

    def __init__(self, step: str, cause: BaseException):
        self.step = step
        self.cause = cause
        super().__init__(f"workflow step {step} failed: {cause}")
