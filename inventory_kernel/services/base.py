"""
BaseService -- abstract base for all mutating kernel services.

Responsibility:
    Provides the common constructor contract for every service that writes
    to the document: each receives the TransactionCoordinator and a Clock.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Services mutate the document only inside ``run_exclusive``; they
      never call ``DocumentStore.save`` themselves.

Failure modes:
    - A subclass that loads and saves the store directly would bypass
      serialization and lose concurrent writes.
"""

from abc import ABC

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.services.transaction_coordinator import TransactionCoordinator


class BaseService(ABC):
    """
    Abstract base class for mutating kernel services.

    Non-goals:
        - Does NOT provide read methods -- those belong in
          ``inventory_kernel/selectors/``.
    """

    def __init__(self, coordinator: TransactionCoordinator, clock: Clock | None = None):
        self.coordinator = coordinator
        self.clock = clock or SystemClock()
