"""Immutable model snapshots.

A snapshot is a read-only mapping of domain fields. Two attributes ride
alongside the data without being part of it, so they never show up when the
snapshot is iterated, serialized or checked against an allow-list:

- ``model_name``: the entity type whose guards apply to the snapshot.
- ``previous``: the snapshot this one was derived from. It is held through a
  weak reference, so a chain of versions never keeps old versions alive.
"""

import weakref
from collections.abc import Mapping
from types import MappingProxyType


class Snapshot(Mapping):
    __slots__ = ("_data", "_model_name", "_previous", "__weakref__")

    def __init__(self, data=None, *, model_name: str | None = None, previous: "Snapshot | None" = None):
        object.__setattr__(self, "_data", MappingProxyType(dict(data or {})))
        object.__setattr__(self, "_model_name", model_name)
        object.__setattr__(self, "_previous", weakref.ref(previous) if previous is not None else None)

    def __setattr__(self, name, value):
        raise AttributeError(f"Snapshot is immutable, cannot set {name!r}")

    def __delattr__(self, name):
        raise AttributeError(f"Snapshot is immutable, cannot delete {name!r}")

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return f"Snapshot({self._model_name!r}, {dict(self._data)!r})"

    @property
    def model_name(self) -> str | None:
        return self._model_name

    @property
    def previous(self) -> "Snapshot | None":
        """The predecessor, or None for a freshly created snapshot."""
        if self._previous is None:
            return None
        return self._previous()

    @property
    def is_update(self) -> bool:
        return self._previous is not None

    def evolve(self, changes: Mapping | None = None, **fields) -> "Snapshot":
        """Return a copy with ``changes`` applied, keeping the same predecessor."""
        return Snapshot(
            {**self._data, **(changes or {}), **fields},
            model_name=self._model_name,
            previous=self.previous,
        )

    def merge(self, changes: Mapping) -> "Snapshot":
        """Return the successor of this snapshot with ``changes`` applied on top."""
        return Snapshot({**self._data, **changes}, model_name=self._model_name, previous=self)

    def tagged(self, model_name: str) -> "Snapshot":
        return Snapshot(self._data, model_name=model_name, previous=self.previous)

    def to_dict(self) -> dict:
        return dict(self._data)
