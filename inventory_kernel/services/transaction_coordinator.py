"""
TransactionCoordinator -- serialized read-modify-write cycles on the document.

Responsibility:
    Guarantees that at most one load -> mutate -> save cycle runs at a
    time, across every thread in the process.  Waiters are served in
    ticket order (FIFO), so every queued mutation eventually runs.

Architecture position:
    Kernel > Services -- owns the DocumentStore for writers.  Every
    mutating service (InventoryService, BootstrapService) goes through
    ``run_exclusive``; selectors never do.

Invariants enforced:
    - Mutual exclusion: no two ``fn`` invocations overlap.
    - Freshness: ``fn`` sees the document as persisted when the slot was
      acquired.
    - Durability before visibility: the document is saved before the slot
      is released and before the result is returned.
    - Atomic failure: if ``fn`` raises, nothing is saved; the slot is
      released in every case, including a failing ``save``.

Failure modes:
    - Any exception from ``fn`` propagates unchanged.
    - StorageIOError from load/save propagates after the slot is released.
    - RuntimeError when ``run_exclusive`` is re-entered from inside ``fn``
      (that would otherwise deadlock on its own ticket).
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import TypeVar

from inventory_kernel.db.document_store import DocumentStore
from inventory_kernel.exceptions import InventoryKernelError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.document import Document

logger = get_logger("services.transaction_coordinator")

T = TypeVar("T")


class TransactionCoordinator:
    """
    FIFO ticket lock around DocumentStore load/save.

    Contract:
        ``run_exclusive(fn)`` loads the document, calls ``fn(document)``,
        which mutates it in place and returns a result, saves the document
        and returns the result.

    Guarantees:
        - Waiting uses a condition variable; there is no polling.
        - A waiter interrupted while queued gives up its ticket, so the
          queue cannot stall behind it.

    Non-goals:
        - No timeouts or cancellation of an acquired slot.
        - No cross-process locking.
    """

    def __init__(self, store: DocumentStore):
        self._store = store
        self._cond = threading.Condition()
        self._next_ticket = 0
        self._now_serving = 0
        self._abandoned: set[int] = set()
        self._owner: int | None = None

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def queue_depth(self) -> int:
        """Number of callers holding or waiting for the slot."""
        with self._cond:
            return self._next_ticket - self._now_serving - len(self._abandoned)

    def run_exclusive(
        self,
        fn: Callable[[Document], T],
        *,
        operation: str = "transaction",
    ) -> T:
        """
        Execute ``fn`` inside the exclusive slot.

        Args:
            fn: Receives the freshly loaded Document; mutates it in place.
            operation: Label used in log lines.

        Returns:
            Whatever ``fn`` returned, after the document has been saved.
        """
        if self._owner == threading.get_ident():
            raise RuntimeError("run_exclusive is not reentrant")

        ticket = self._acquire()
        started = time.monotonic()
        try:
            self._owner = threading.get_ident()
            document = self._store.load()
            try:
                result = fn(document)
            except InventoryKernelError as exc:
                logger.info(
                    "transaction_rejected",
                    extra={"operation": operation, "ticket": ticket, "error_code": exc.code},
                )
                raise
            self._store.save(document)
            logger.debug(
                "transaction_committed",
                extra={
                    "operation": operation,
                    "ticket": ticket,
                    "duration_ms": round((time.monotonic() - started) * 1000, 3),
                },
            )
            return result
        finally:
            self._owner = None
            self._release()

    # -- ticket lock -------------------------------------------------------

    def _acquire(self) -> int:
        with self._cond:
            ticket = self._next_ticket
            self._next_ticket += 1
            try:
                while ticket != self._now_serving:
                    self._cond.wait()
            except BaseException:
                self._abandon(ticket)
                raise
            return ticket

    def _release(self) -> None:
        with self._cond:
            self._advance()

    def _abandon(self, ticket: int) -> None:
        # caller holds self._cond
        if ticket == self._now_serving:
            self._advance()
        else:
            self._abandoned.add(ticket)

    def _advance(self) -> None:
        # caller holds self._cond
        self._now_serving += 1
        while self._now_serving in self._abandoned:
            self._abandoned.discard(self._now_serving)
            self._now_serving += 1
        self._cond.notify_all()
