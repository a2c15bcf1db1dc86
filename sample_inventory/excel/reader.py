from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from .headers import HEADER_MAP

"""Read-only tabular view of the ledger workbook (pandas).

Used for inspection only; all writes go through the row store. Row 1 is the
header row, canonical labels are renamed to their logical keys and unknown
columns are kept as they are.
"""

__all__ = [
    "read_ledger_frame",
    "preview_rows",
]

_LABEL_TO_KEY = {label: key for key, label in HEADER_MAP.items()}


def read_ledger_frame(path: Path) -> pd.DataFrame:
    """Load the first worksheet as a DataFrame keyed by logical field names.

    Rows that are entirely empty are dropped.
    """
    df = pd.read_excel(path, sheet_name=0, header=0, dtype=object)
    renamed: dict[Any, Any] = {}
    for col in df.columns:
        label = str(col).strip()
        if label in _LABEL_TO_KEY:
            renamed[col] = _LABEL_TO_KEY[label]
    df = df.rename(columns=renamed)
    return df.dropna(how="all").reset_index(drop=True)


def preview_rows(df: pd.DataFrame, limit: int) -> list[dict[str, Any]]:
    """First ``limit`` rows as JSON-friendly dicts (NaN -> None, dates -> ISO)."""
    rows: list[dict[str, Any]] = []
    for _, raw in df.head(limit).iterrows():
        row: dict[str, Any] = {}
        for col, val in raw.items():
            if pd.isna(val):
                row[str(col)] = None
            elif hasattr(val, "isoformat"):
                row[str(col)] = val.isoformat()
            else:
                row[str(col)] = val
        rows.append(row)
    return rows
