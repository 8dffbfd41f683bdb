"""
DocumentStore -- on-disk persistence of the whole database as one JSON file.

Responsibility:
    Loads and saves the root ``Document``.  Each ``load`` re-reads the
    file (no caching) so writes made by other processes are observed.
    An unreadable file is quarantined under a timestamped name and an empty
    document is returned, so the service stays available after corruption.

Architecture position:
    Kernel > DB -- the only module that touches the data file.  Mutating
    callers reach it exclusively through TransactionCoordinator; read-only
    selectors call ``load(quarantine=False)`` directly.

Invariants enforced:
    - ``save`` is a full-document rewrite through a temp file and
      ``os.replace``; concurrent readers see the old or the new document,
      never a torn one.
    - ``save(load())`` leaves document content unchanged.
    - Only the exact file that was parsed is ever quarantined: its identity
      (device, inode, size, mtime) is re-checked before the rename, so a
      document committed in between is never moved aside.

Failure modes:
    - StorageCorruptError is raised by ``_parse`` and handled inside
      ``load``; it never reaches callers.
    - StorageIOError on any other filesystem failure (read, rename, write).
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.exceptions import StorageCorruptError, StorageIOError
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.document import Document

logger = get_logger("db.document_store")

# A reader that keeps finding a freshly replaced file gives up after this many tries.
_MAX_READ_ATTEMPTS = 5


class DocumentStore:
    """
    Single-file JSON document store.

    Contract:
        ``load()`` always returns a usable Document; ``save()`` either
        replaces the file completely or raises StorageIOError leaving the
        previous file in place.

    Non-goals:
        - No locking; serialization of writers is TransactionCoordinator's job.
        - No multi-file or multi-process coordination.
    """

    def __init__(self, path: str | os.PathLike[str], clock: Clock | None = None):
        self._path = Path(path)
        self._clock = clock or SystemClock()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self, *, quarantine: bool = True) -> Document:
        """
        Read the current document from disk.

        Args:
            quarantine: Move an unreadable file aside.  Read-only callers
                outside the coordinator pass False and just get an empty
                Document, leaving recovery to the next writer.

        Postconditions:
            - Missing file -> fresh empty Document, nothing written.
            - Corrupt file -> file renamed to ``<name>.corrupt.<millis>``,
              fresh empty Document returned.  Only the exact file that was
              parsed is renamed; if it was replaced in the meantime the new
              file is read instead.

        Raises:
            StorageIOError: If the file exists but cannot be read or
                quarantined, or keeps being replaced while it is read.
        """
        for _ in range(_MAX_READ_ATTEMPTS):
            try:
                with open(self._path, "rb") as fh:
                    identity = _identity(os.fstat(fh.fileno()))
                    raw = fh.read()
            except FileNotFoundError:
                return Document.empty()
            except OSError as exc:
                raise StorageIOError(str(self._path), "read", str(exc)) from exc

            try:
                return self._parse(raw)
            except StorageCorruptError as exc:
                if not quarantine:
                    logger.warning(
                        "store_unreadable",
                        extra={"path": str(self._path), "reason": exc.reason},
                    )
                    return Document.empty()
                quarantined = self._quarantine(identity)
                if quarantined is None:
                    logger.info("quarantine_skipped", extra={"path": str(self._path)})
                    continue
                logger.warning(
                    "store_quarantined",
                    extra={
                        "path": str(self._path),
                        "quarantined_to": str(quarantined),
                        "reason": exc.reason,
                    },
                )
                return Document.empty()

        raise StorageIOError(
            str(self._path), "read", "data file kept changing while it was being read"
        )

    def save(self, document: Document) -> None:
        """
        Persist ``document``, replacing any prior content.

        Raises:
            StorageIOError: If the temp file cannot be written or moved into
                place.  The previous file is left untouched.
        """
        payload = json.dumps(document.to_dict(), indent=2, ensure_ascii=False)
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            raise StorageIOError(str(self._path), "write", str(exc)) from exc

        logger.debug(
            "store_saved",
            extra={
                "path": str(self._path),
                "items": len(document.inventory_items),
                "audit_entries": len(document.inventory_audit),
            },
        )

    # -- internals ---------------------------------------------------------

    def _parse(self, raw: bytes) -> Document:
        try:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            return Document.from_dict(json.loads(raw.decode("utf-8")))
        except ValueError as exc:
            raise StorageCorruptError(str(self._path), str(exc)) from exc

    def _quarantine(self, identity: tuple[int, ...]) -> Path | None:
        """
        Rename the corrupt file aside if it is still the one that was read.

        Returns None when the file is gone or has been replaced since it was
        parsed (another caller recovered it and a writer may already have
        committed a valid document there).
        """
        try:
            if _identity(os.stat(self._path)) != identity:
                return None
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageIOError(str(self._path), "quarantine", str(exc)) from exc

        millis = int(self._clock.now().timestamp() * 1000)
        target = self._path.with_name(f"{self._path.name}.corrupt.{millis}")
        suffix = 1
        while target.exists():
            target = self._path.with_name(f"{self._path.name}.corrupt.{millis}-{suffix}")
            suffix += 1
        try:
            os.replace(self._path, target)
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageIOError(str(self._path), "quarantine", str(exc)) from exc
        return target


def _identity(st: os.stat_result) -> tuple[int, ...]:
    # save() always installs a new inode, so any commit changes this
    return (st.st_dev, st.st_ino, st.st_size, st.st_mtime_ns)
