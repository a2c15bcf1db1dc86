from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from ..models.form_record import FormRecord
from ..models.label import LabelRecord
from .validation import normalize_sample_items

"""Label expander: sequential small-label codes from one base sample number.

``S-001`` x3  -> S-001, S-002, S-003   (digit width kept, never truncated)
``BOX`` x2    -> BOX-01, BOX-02        (2-digit running suffix)
"""

__all__ = [
    "build_label_codes",
    "build_labels_from_form",
    "build_label_rows",
]

_TRAILING_DIGITS = re.compile(r"[0-9]+$")


def build_label_codes(base_id: str | None, quantity: Any) -> list[str]:
    """Expand ``base_id`` into ``max(1, quantity)`` codes.

    An empty or missing base yields no codes whatever the quantity.
    """
    base = (base_id or "").strip()
    if not base:
        return []
    try:
        count = max(1, int(quantity))
    except (TypeError, ValueError):
        count = 1

    match = _TRAILING_DIGITS.search(base)
    if match is None:
        return [f"{base}-{i + 1:02d}" for i in range(count)]

    digits = match.group()
    prefix = base[: match.start()]
    width = len(digits)
    start = int(digits)
    # zfill pads up only, so 99 + 1 becomes "100" rather than wrapping
    return [f"{prefix}{str(start + i).zfill(width)}" for i in range(count)]


def build_labels_from_form(form: FormRecord) -> list[LabelRecord]:
    """Labels for the first 10 sample items, in item order."""
    labels: list[LabelRecord] = []
    for item in normalize_sample_items(form.sample_items):
        for code in build_label_codes(item.sample_no, item.qty):
            labels.append(
                LabelRecord(
                    code=code,
                    customer_name=form.customer_name,
                    model=form.model,
                    in_date=form.in_date,
                )
            )
    return labels


def build_label_rows(
    labels: Sequence[LabelRecord], columns_per_row: int
) -> list[list[LabelRecord | None]]:
    """Chunk labels into rows of ``columns_per_row`` slots.

    The last row is padded with None (an absent slot), not blank labels.
    """
    if columns_per_row < 1:
        raise ValueError(f"columns_per_row must be >= 1, got {columns_per_row}")
    rows: list[list[LabelRecord | None]] = []
    for start in range(0, len(labels), columns_per_row):
        row: list[LabelRecord | None] = list(labels[start : start + columns_per_row])
        row.extend([None] * (columns_per_row - len(row)))
        rows.append(row)
    return rows
