"""HTTP surface for the inventory kernel."""

from inventory_api.app import create_app

__all__ = ["create_app"]
