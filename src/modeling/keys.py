"""Property keys accepted by guard factories.

A key is either a literal property name or a function computed against the
object being guarded. A computed key returns ``None`` when it does not apply
right now, e.g. a field that is only frozen once an order is approved.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Key:
    name: str

    def resolve(self, obj) -> str | None:
        return self.name


@dataclass(frozen=True)
class Computed:
    fn: Callable

    def resolve(self, obj) -> str | None:
        return self.fn(obj)


PropKey = Key | Computed


def as_key(key) -> PropKey:
    if isinstance(key, Key | Computed):
        return key
    if isinstance(key, str):
        return Key(key)
    if callable(key):
        return Computed(key)
    raise TypeError(f"Property key must be a name or a callable, got {key!r}")


def as_keys(keys: Iterable) -> tuple[PropKey, ...]:
    return tuple(as_key(k) for k in keys)


def resolve_keys(obj, keys: Iterable[PropKey]) -> list[str]:
    """Resolve ``keys`` against ``obj``, dropping keys that resolve to None."""
    resolved = (k.resolve(obj) for k in keys)
    return list(dict.fromkeys(k for k in resolved if k is not None))
