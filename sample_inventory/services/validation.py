from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import fields, replace
from typing import Any

from ..models.form_record import FIELD_KEYS, FormRecord, SampleItem, coerce_qty

"""Form validation, sample normalization and overwrite merge.

Missing-field identifiers use the payload key names (``caseNo``,
``sampleItems[0].sampleName``) since they are reported back to the form.
"""

__all__ = [
    "MAX_SAMPLE_ITEMS",
    "REQUIRED_STRING_FIELDS",
    "ValidationError",
    "normalize_sample_items",
    "get_missing_fields",
    "missing_document_fields",
    "merge_records",
]

MAX_SAMPLE_ITEMS = 10

REQUIRED_STRING_FIELDS = (
    "case_no",
    "quote_no",
    "customer_name",
    "product_name",
    "model",
    "sales",
    "in_operator",
    "in_date",
)


class ValidationError(Exception):
    """Raised when a record lacks required fields."""

    def __init__(self, missing_fields: list[str]) -> None:
        super().__init__(f"missing fields: {', '.join(missing_fields)}")
        self.missing_fields = missing_fields


def normalize_sample_items(items: Sequence[SampleItem] | None) -> tuple[SampleItem, ...]:
    """Clamp to 10 items, trim number/name, keep remark as is.

    An empty input yields a single blank placeholder so that a record always
    has a primary sample slot.
    """
    if not items:
        return (SampleItem(),)
    return tuple(
        SampleItem(
            sample_no=(item.sample_no or "").strip(),
            sample_name=(item.sample_name or "").strip(),
            qty=coerce_qty(item.qty),
            remark=item.remark or "",
        )
        for item in items[:MAX_SAMPLE_ITEMS]
    )


def _is_valid_number(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _dedupe(names: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(names))


def get_missing_fields(form: FormRecord) -> list[str]:
    missing: list[str] = []
    for attr in REQUIRED_STRING_FIELDS:
        value = getattr(form, attr)
        if not isinstance(value, str) or value.strip() == "":
            missing.append(FIELD_KEYS[attr])

    if not _is_valid_number(form.total_in_qty):
        missing.append(FIELD_KEYS["total_in_qty"])

    items = normalize_sample_items(form.sample_items)
    if not items:
        missing.append("sampleItems")
    for index, item in enumerate(items):
        if not item.sample_no:
            missing.append(f"sampleItems[{index}].sampleNo")
        if not item.sample_name:
            missing.append(f"sampleItems[{index}].sampleName")

    return _dedupe(missing)


def missing_document_fields(form: FormRecord, required: Iterable[str]) -> list[str]:
    """Subset check used before building a document payload.

    ``required`` holds attribute names; strings must be non-blank and numbers
    present.
    """
    missing: list[str] = []
    for attr in required:
        value = getattr(form, attr)
        if isinstance(value, str):
            if value.strip() == "":
                missing.append(FIELD_KEYS[attr])
        elif not _is_valid_number(value):
            missing.append(FIELD_KEYS[attr])
    return _dedupe(missing)


def merge_records(existing: FormRecord, incoming: FormRecord) -> FormRecord:
    """Overlay ``incoming`` onto ``existing`` field by field.

    - strings override only when non-blank
    - numbers override only when present and not NaN
    - sample_items override wholesale only when non-empty
    - anything else overrides when not None
    """
    changes: dict[str, Any] = {}
    for f in fields(FormRecord):
        value = getattr(incoming, f.name)
        if f.name == "sample_items":
            if value:
                changes[f.name] = normalize_sample_items(value)
            continue
        if isinstance(value, str):
            if value.strip() != "":
                changes[f.name] = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            if not math.isnan(value):
                changes[f.name] = value
        elif value is not None:
            changes[f.name] = value
    return replace(existing, **changes)
