"""Inventory adapter factory.

INVENTORY_ADAPTER selects the implementation:
- ``fake`` (default): FakeInventory, answers immediately
- ``bus``: EventBusInventory over the configured event bus; the reply
  timeout comes from INVENTORY_REPLY_TIMEOUT (seconds)
"""

import os

from ordering.inventory.port import InventoryService

_current_inventory: InventoryService | None = None


def get_inventory() -> InventoryService:
    """Return the configured inventory adapter (singleton)."""
    global _current_inventory
    if _current_inventory is None:
        adapter = os.environ.get("INVENTORY_ADAPTER", "fake")
        if adapter == "fake":
            from ordering.inventory.fake_adapter import FakeInventory

            _current_inventory = FakeInventory()
        elif adapter == "bus":
            from ordering.inventory.bus_adapter import EventBusInventory
            from shared.bus import get_event_bus

            timeout = float(os.environ.get("INVENTORY_REPLY_TIMEOUT", "30"))
            _current_inventory = EventBusInventory(get_event_bus(), timeout=timeout)
        else:
            raise ValueError(f"Unknown inventory adapter: {adapter}")
    return _current_inventory


def set_inventory(inventory: InventoryService) -> None:
    """Override the active inventory adapter (useful for tests)."""
    global _current_inventory
    _current_inventory = inventory


def reset_inventory() -> None:
    """Reset the inventory singleton."""
    global _current_inventory
    _current_inventory = None
