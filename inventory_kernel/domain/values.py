"""
Values -- JSON value rules for open-ended item attributes.

Responsibility:
    Defines ``FieldValue``, the closed set of value kinds an inventory item
    attribute may hold, and the helpers that enforce it: validation of
    caller-supplied values, numeric coercion for ``quantity``/``price``,
    deep snapshots for audit records, and the canonical timestamp format.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.

Invariants enforced:
    - Every attribute written to the document is a FieldValue, so the
      document always serializes to JSON and reloads unchanged.
    - Timestamps are UTC, millisecond precision, ``Z`` suffix; lexical
      order equals chronological order.

Failure modes:
    - ValidationError for non-JSON values, non-finite floats, non-string
      mapping keys, and non-numeric input to ``coerce_numeric``.
"""

from __future__ import annotations

import copy
import math
from datetime import datetime, timezone
from typing import Any, Union

from inventory_kernel.exceptions import ValidationError

# Tagged union of the primitive kinds a JSON document can hold.
FieldValue = Union[
    None,
    bool,
    int,
    float,
    str,
    list["FieldValue"],
    dict[str, "FieldValue"],
]


def validate_field_value(value: Any, field: str) -> FieldValue:
    """
    Check that ``value`` is a FieldValue and return it unchanged.

    Tuples are accepted and normalized to lists (they serialize the same).

    Raises:
        ValidationError: If any nested value is outside the union.
    """
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"Field '{field}' must be a finite number", field=field)
        return value
    if isinstance(value, (list, tuple)):
        return [validate_field_value(v, field) for v in value]
    if isinstance(value, dict):
        out: dict[str, FieldValue] = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise ValidationError(
                    f"Field '{field}' has a non-string key {k!r}", field=field
                )
            out[k] = validate_field_value(v, field)
        return out
    raise ValidationError(
        f"Field '{field}' has unsupported type {type(value).__name__}", field=field
    )


def coerce_numeric(value: Any, field: str) -> int | float | None:
    """
    Coerce an update value for a numeric field.

    None stays None. Booleans become 0/1. Strings are parsed as int first,
    then float; blank strings become 0.

    Raises:
        ValidationError: If the value is not numeric or not finite.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValidationError(f"Field '{field}' must be a finite number", field=field)
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(
                f"Field '{field}' must be numeric, got {value!r}", field=field
            ) from None
        if not math.isfinite(number):
            raise ValidationError(f"Field '{field}' must be a finite number", field=field)
        return number
    raise ValidationError(
        f"Field '{field}' must be numeric, got {type(value).__name__}", field=field
    )


def snapshot(record: dict[str, Any]) -> dict[str, Any]:
    """Independent deep copy of a stored record."""
    return copy.deepcopy(record)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
