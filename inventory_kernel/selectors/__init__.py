"""Read-only query selectors. They load the store directly and never write."""

from inventory_kernel.selectors.inventory_selector import InventorySelector

__all__ = ["InventorySelector"]
