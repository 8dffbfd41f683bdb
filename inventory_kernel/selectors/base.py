"""
Module: inventory_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
Architecture position: Kernel > Selectors.  May import from db/ and
    models/.  MUST NOT import from services/.

Invariants enforced:
    - Read-only access: selectors call ``DocumentStore.load(quarantine=False)``
      and never ``save``; they do not take the TransactionCoordinator's slot.
    - DTO return convention: selectors return frozen dataclasses, never
      the live dict records of a loaded Document.

Consistency:
    A read concurrent with an in-flight write observes the document either
    before or after that write (``save`` is an atomic file replace).
"""

from abc import ABC

from inventory_kernel.db.document_store import DocumentStore
from inventory_kernel.models.document import Document


class BaseSelector(ABC):
    """Abstract base class for all selectors."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def _load(self) -> Document:
        # readers never rename the data file; the next writer recovers it
        return self.store.load(quarantine=False)
