"""
Kernel services -- the write path.

Every mutation of the document runs through TransactionCoordinator.
"""

from inventory_kernel.services.auditor_service import AuditorService
from inventory_kernel.services.bootstrap_service import BootstrapResult, BootstrapService
from inventory_kernel.services.inventory_service import InventoryService
from inventory_kernel.services.transaction_coordinator import TransactionCoordinator

__all__ = [
    "AuditorService",
    "BootstrapResult",
    "BootstrapService",
    "InventoryService",
    "TransactionCoordinator",
]
