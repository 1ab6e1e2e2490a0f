"""Event bus factory.

Uses InMemoryEventBus by default. Configure via the EVENT_BUS_ADAPTER
environment variable.
"""

import os

from shared.bus.port import EventBus

_current_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Return the configured event bus (singleton)."""
    global _current_bus
    if _current_bus is None:
        adapter = os.environ.get("EVENT_BUS_ADAPTER", "memory")
        if adapter == "memory":
            from shared.bus.memory_adapter import InMemoryEventBus

            _current_bus = InMemoryEventBus()
        else:
            raise ValueError(f"Unknown event bus adapter: {adapter}")
    return _current_bus


def set_event_bus(bus: EventBus) -> None:
    """Override the active event bus (useful for tests)."""
    global _current_bus
    _current_bus = bus


def reset_event_bus() -> None:
    """Reset the event bus singleton (useful for testing)."""
    global _current_bus
    _current_bus = None
