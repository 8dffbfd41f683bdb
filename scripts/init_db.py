#!/usr/bin/env python3
"""
Initialize the inventory data file.

Creates the data file if needed, ensures the ``admin`` user exists and
writes a fresh admin bearer token to ``app_meta.ADMIN_TOKEN``.  A corrupt
data file is quarantined by the store and replaced with an empty document.

Usage:
    python3 scripts/init_db.py [--data-file PATH] [--token TOKEN]

The token defaults to $ADMIN_TOKEN, else a random UUID.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from inventory_config import get_active_config
from inventory_kernel.db.document_store import DocumentStore
from inventory_kernel.exceptions import StorageIOError
from inventory_kernel.logging_config import configure_logging
from inventory_kernel.services.bootstrap_service import BootstrapService
from inventory_kernel.services.transaction_coordinator import TransactionCoordinator


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the admin user and token.")
    parser.add_argument("--data-file", type=Path, help="data file (overrides config)")
    parser.add_argument("--token", help="admin token (default: $ADMIN_TOKEN or random)")
    args = parser.parse_args(argv)

    configure_logging(level=logging.WARNING)
    config = get_active_config()
    data_file = args.data_file or config.data_file

    coordinator = TransactionCoordinator(DocumentStore(data_file))
    try:
        result = BootstrapService(coordinator).initialize(
            args.token or os.environ.get("ADMIN_TOKEN")
        )
    except StorageIOError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    print("\n=== DB INIT COMPLETE ===")
    print(f"ADMIN_TOKEN={result.admin_token}")
    print(f"data saved to {data_file}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
