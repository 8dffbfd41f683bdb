"""Persistence layer: the single-file JSON document store."""

from inventory_kernel.db.document_store import DocumentStore

__all__ = ["DocumentStore"]
