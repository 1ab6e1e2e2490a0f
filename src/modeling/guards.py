"""Guard library: composable checks and transforms applied on every update.

Each factory below returns a :class:`~modeling.registry.Mixin`: a named
function ``(snapshot) -> snapshot`` bound to the phase it runs in. A guard
either returns the (possibly augmented) snapshot or raises one of the errors
in :mod:`modeling.exceptions`.

Pre-phase guards see the proposed changes; the snapshot being updated is
available as ``changes.previous``. Post-phase guards see the merged result.
A snapshot with no predecessor is being created, and the update-only guards
(freeze, allow) let it through.

Property keys may be literal names or functions evaluated against the
snapshot (see :mod:`modeling.keys`), which makes conditional requirements and
conditional freezing possible.
"""

import re
from collections.abc import Callable, Collection
from dataclasses import dataclass
from typing import Any

from modeling.cipher import get_cipher
from modeling.exceptions import (
    ImmutablePropertyError,
    MissingPropertyError,
    UnknownPropertyError,
    ValidationError,
)
from modeling.keys import Computed, as_keys, resolve_keys
from modeling.registry import Mixin, Phase


# ---------------------------------------------------------------------------
# Regular expressions usable by name in ValidationSpec.regex
# ---------------------------------------------------------------------------
class RegEx:
    email = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]{2,}$")
    ipv4_address = re.compile(r"^(?:(?:25[0-5]|2[0-4]\d|[01]?\d?\d)\.){3}(?:25[0-5]|2[0-4]\d|[01]?\d?\d)$")
    ipv6_address = re.compile(
        r"^(?:[0-9A-Fa-f]{1,4}:){7}[0-9A-Fa-f]{1,4}$"
        r"|^(?:[0-9A-Fa-f]{1,4}(?::[0-9A-Fa-f]{1,4})*)?::(?:[0-9A-Fa-f]{1,4}(?::[0-9A-Fa-f]{1,4})*)?$"
    )
    phone = re.compile(r"^[1-9]\d{2}-\d{3}-\d{4}")
    # Visa, MasterCard, American Express, Diners Club, Discover
    credit_card = re.compile(
        r"^(?:4\d{12}(?:\d{3})?|5[1-5]\d{14}|3[47]\d{13}|3(?:0[0-5]|[68]\d)\d{11}|6(?:011|5\d{2})\d{12})$"
    )

    @classmethod
    def test(cls, expr, value) -> bool:
        """Search ``value`` for ``expr``: a pattern name above, a pattern, or a regex string."""
        named = getattr(cls, expr, None) if isinstance(expr, str) else None
        pattern = named if isinstance(named, re.Pattern) else expr
        return re.search(pattern, str(value)) is not None


# ---------------------------------------------------------------------------
# Specs
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ValidationSpec:
    """Checks for one property. A check is enabled when its field is set."""

    prop_key: str
    is_valid: Callable[[Any, Any], bool] | None = None
    values: Collection | None = None
    regex: str | re.Pattern | None = None
    maxlen: int | None = None
    maxnum: float | None = None
    typeof: type | tuple[type, ...] | None = None


@dataclass(frozen=True)
class UpdaterSpec:
    """Recomputes derived fields whenever ``prop_key`` is among the changes."""

    prop_key: str
    update: Callable[[Any, Any], dict]


def _at_most(limit, value) -> bool:
    try:
        return value <= limit
    except TypeError:
        return False


def _len_at_most(limit, value) -> bool:
    try:
        return len(value) <= limit
    except TypeError:
        return False


_CHECKS = {
    "is_valid": lambda rule, obj, value: rule(obj, value),
    "values": lambda rule, obj, value: value in rule,
    "regex": lambda rule, obj, value: RegEx.test(rule, value),
    "typeof": lambda rule, obj, value: isinstance(value, rule),
    "maxnum": lambda rule, obj, value: _at_most(rule, value),
    "maxlen": lambda rule, obj, value: _len_at_most(rule, value),
}


def is_valid(spec: ValidationSpec, obj, value) -> bool:
    """True when every enabled check in ``spec`` passes for ``value``."""
    return all(
        check(getattr(spec, name), obj, value) for name, check in _CHECKS.items() if getattr(spec, name) is not None
    )


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------
def _present(obj, key) -> bool:
    if key in obj:
        return bool(obj[key])
    # Omitted from an update: the value carried over from the predecessor counts
    previous = obj.previous
    return previous is not None and bool(previous.get(key))


def require(*keys, name: str = "require_properties") -> Mixin:
    """Fail with MissingPropertyError when any required property is absent or empty."""
    prop_keys = as_keys(keys)

    def require_properties(obj):
        missing = [key for key in resolve_keys(obj, prop_keys) if not _present(obj, key)]
        if missing:
            raise MissingPropertyError(missing)
        return obj

    return Mixin(name, Phase.PRE, require_properties)


def freeze(*keys, name: str = "freeze_properties") -> Mixin:
    """Reject updates that touch a frozen property. Creation is not affected."""
    prop_keys = as_keys(keys)

    def freeze_properties(obj):
        if obj.is_update:
            frozen = resolve_keys(obj, prop_keys)
            mutations = [key for key in obj if key in frozen]
            if mutations:
                raise ImmutablePropertyError(mutations)
        return obj

    return Mixin(name, Phase.PRE, freeze_properties)


def allow(*keys, reserved: Collection[str] = (), name: str = "allow_properties") -> Mixin:
    """Reject updates naming properties outside ``keys`` and ``reserved``."""
    prop_keys = as_keys(keys)

    def allow_properties(obj):
        if obj.is_update:
            allowed = set(resolve_keys(obj, prop_keys)) | set(reserved)
            unknown = [key for key in obj if key not in allowed]
            if unknown:
                raise UnknownPropertyError(unknown)
        return obj

    return Mixin(name, Phase.PRE, allow_properties)


def validate(*specs: ValidationSpec, name: str = "validate_properties") -> Mixin:
    """Check the merged snapshot against ``specs``; empty properties are skipped."""

    def validate_properties(obj):
        invalid = [spec.prop_key for spec in specs if obj.get(spec.prop_key) and not is_valid(spec, obj, obj[spec.prop_key])]
        if invalid:
            raise ValidationError(invalid)
        return obj

    return Mixin(name, Phase.POST, validate_properties)


def derive(*updaters: UpdaterSpec, name: str = "update_properties") -> Mixin:
    """Merge recomputed fields into the changes when a trigger property changes.

    Later updaters win when two of them produce the same field.
    """

    def update_properties(obj):
        updates = {}
        for updater in updaters:
            value = obj.get(updater.prop_key)
            if value:
                updates.update(updater.update(obj, value))
        return obj.evolve(updates) if updates else obj

    return Mixin(name, Phase.PRE, update_properties)


def _transform(obj, keys, fn):
    updates = {key: fn(obj[key]) for key in keys if obj.get(key)}
    return obj.evolve(updates) if updates else obj


def encrypt(*keys, transform: Callable | None = None, name: str = "encrypt_properties") -> Mixin:
    """Replace each present property with its encrypted value."""
    prop_keys = as_keys(keys)

    def encrypt_properties(obj):
        fn = transform or get_cipher().encrypt
        return _transform(obj, resolve_keys(obj, prop_keys), fn)

    return Mixin(name, Phase.PRE, encrypt_properties)


def hash_properties(*keys, transform: Callable | None = None, name: str = "hash_passwords") -> Mixin:
    """Replace each present property with its one-way hash."""
    prop_keys = as_keys(keys)

    def hash_passwords(obj):
        fn = transform or get_cipher().hash
        return _transform(obj, resolve_keys(obj, prop_keys), fn)

    return Mixin(name, Phase.PRE, hash_passwords)


def check_format(prop_key: str, expr) -> Computed:
    """A computed key that first checks ``prop_key`` against ``expr``.

    Raises ValidationError naming ``prop_key`` when the value is present and
    does not match; otherwise resolves to ``prop_key``.
    """

    def checked_key(obj):
        value = obj.get(prop_key)
        if value and not RegEx.test(expr, value):
            raise ValidationError([prop_key])
        return prop_key

    return Computed(checked_key)
