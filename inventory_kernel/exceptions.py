"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (the HTTP layer, the bootstrap CLI, tests) must branch on the kind
of failure, not on message wording. Every exception therefore:
  1. Has its own class (catch by type, not message)
  2. Carries a CODE class attribute (machine-readable, API-safe)
  3. Stores structured DATA as attributes (not just a message string)

Example - RIGHT way:
    try:
        service.create_item(sku, name, fields, actor)
    except DuplicateSkuError as e:
        return {"code": e.code, "message": str(e), "sku": e.sku}

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- ValidationError
    |   +-- NoUpdatesError
    |
    +-- ItemError
    |   +-- ItemNotFoundError
    |   +-- DuplicateSkuError
    |
    +-- StorageError
        +-- StorageCorruptError
        +-- StorageIOError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category    | Code                | When Raised
------------|---------------------|-------------------------------------------
Validation  | VALIDATION          | Missing sku/product_name, bad field value
            | NO_UPDATES          | Patch has no allow-listed fields
------------|---------------------|-------------------------------------------
Item        | NOT_FOUND           | item_id does not exist
            | DUPLICATE_SKU       | An active item already uses the sku
------------|---------------------|-------------------------------------------
Storage     | STORAGE_CORRUPT     | Data file unparseable (recovered by load)
            | STORAGE_IO_FAILURE  | Read/write/rename of the data file failed

===============================================================================
HANDLING PATTERNS
===============================================================================

1. StorageCorruptError never leaves DocumentStore.load(): the store
   quarantines the file and continues with an empty document.

2. StorageIOError is fatal to the triggering operation. The coordinator
   releases its slot before it propagates; nothing retries automatically.

3. The HTTP layer maps ``code`` to a status and never echoes structured
   storage attributes (paths) to clients.
"""


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Validation exceptions


class ValidationError(InventoryKernelError):
    """Request data failed validation."""

    code: str = "VALIDATION"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NoUpdatesError(ValidationError):
    """Patch contained none of the updatable fields."""

    code: str = "NO_UPDATES"

    def __init__(self, allowed_fields: tuple[str, ...]):
        self.allowed_fields = allowed_fields
        super().__init__("No valid fields")


# Item exceptions


class ItemError(InventoryKernelError):
    """Base exception for inventory item errors."""

    code: str = "ITEM_ERROR"


class ItemNotFoundError(ItemError):
    """Inventory item with given ID was not found."""

    code: str = "NOT_FOUND"

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Inventory item not found: {item_id}")


class DuplicateSkuError(ItemError):
    """An active inventory item already uses the SKU."""

    code: str = "DUPLICATE_SKU"

    def __init__(self, sku: str, existing_item_id: str):
        self.sku = sku
        self.existing_item_id = existing_item_id
        super().__init__("SKU already exists")


# Storage exceptions


class StorageError(InventoryKernelError):
    """Base exception for document storage errors."""

    code: str = "STORAGE_ERROR"


class StorageCorruptError(StorageError):
    """
    Persisted document could not be parsed.

    Raised by the parser and handled inside DocumentStore.load().
    """

    code: str = "STORAGE_CORRUPT"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Corrupt document at {path}: {reason}")


class StorageIOError(StorageError):
    """Filesystem operation on the document file failed."""

    code: str = "STORAGE_IO_FAILURE"

    def __init__(self, path: str, operation: str, reason: str):
        self.path = path
        self.operation = operation
        self.reason = reason
        super().__init__(f"Storage {operation} failed for {path}: {reason}")
