from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from openpyxl.worksheet.worksheet import Worksheet

"""Canonical header set and header-driven column resolution.

Column positions are never assumed: every field access scans row 1 for the
localized label. Labels must match existing ledger files byte for byte after
trimming, so they are part of the file format.
"""

__all__ = [
    "HEADER_MAP",
    "CANONICAL_HEADERS",
    "header_values",
    "resolve_column",
    "ensure_header_row",
]

# logical key -> localized header label, in canonical column order
HEADER_MAP: dict[str, str] = {
    "case_no": "樣品總編號",
    "quote_no": "報價單編號",
    "customer_name": "客戶名稱",
    "product_name": "品名",
    "model": "型號",
    "sales": "負責業務",
    "in_operator": "樣品入庫人",
    "in_date": "入庫日期",
    "total_in_qty": "入庫總數量",
    "sample_no": "樣品編號",
    "sample_name": "樣品名稱",
    "remark": "備註",
    "borrow_date": "樣品借出日期",
    "borrower": "借出人",
    "return_date": "樣品歸還日期",
    "return_operator": "歸還人",
    "out_date": "出庫日期",
    "out_qty": "樣品出庫數",
}

CANONICAL_HEADERS: tuple[str, ...] = tuple(HEADER_MAP.values())


def header_values(worksheet: Worksheet) -> list[Any]:
    """Raw values of row 1, index 0 == column 1."""
    return [cell.value for cell in worksheet[1]]


def resolve_column(headers: Sequence[Any], label: str) -> int | None:
    """1-based column of ``label`` in ``headers``; None when absent.

    Only string cells take part in the match and they are compared trimmed.
    """
    for index, value in enumerate(headers, start=1):
        if isinstance(value, str) and value.strip() == label:
            return index
    return None


def ensure_header_row(worksheet: Worksheet) -> list[str]:
    """Append every canonical label missing from row 1.

    Existing headers (canonical or not) keep their column. Missing labels go
    to the right of the last non-empty header cell, in canonical order.
    Returns the appended labels; an empty list means the row was complete.
    """
    headers = header_values(worksheet)
    existing = {v.strip() for v in headers if isinstance(v, str)}
    last_used = 0
    for index, value in enumerate(headers, start=1):
        if value is not None:
            last_used = index

    appended: list[str] = []
    for label in CANONICAL_HEADERS:
        if label in existing:
            continue
        last_used += 1
        worksheet.cell(row=1, column=last_used, value=label)
        appended.append(label)
    return appended
