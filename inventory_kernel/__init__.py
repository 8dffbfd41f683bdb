"""
Inventory Kernel

A single-file document store for inventory tracking with:
- Serialized read-modify-write transactions
- Atomic full-document persistence with corruption quarantine
- Soft delete of inventory items
- Append-only, newest-first audit trail with field-level diffs
"""

__version__ = "0.1.0"
