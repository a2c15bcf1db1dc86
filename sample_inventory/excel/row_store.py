from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from datetime import date, datetime
from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from ..models.form_record import FormRecord, SampleItem, parse_number
from ..services.validation import (
    MAX_SAMPLE_ITEMS,
    ValidationError,
    get_missing_fields,
    merge_records,
    normalize_sample_items,
)
from .headers import CANONICAL_HEADERS, HEADER_MAP, ensure_header_row, header_values, resolve_column
from .remark import build_remark, parse_remark

"""Worksheet-backed row store.

One FormRecord per physical row of the first worksheet; row 1 is the header
row. Every operation is a full load -> mutate -> save cycle against the file,
with no caching between calls and no locking: concurrent writers race and the
last save wins.
"""

__all__ = [
    "DEFAULT_SHEET_TITLE",
    "RowNotFoundError",
    "RowResult",
    "RowStore",
    "cell_to_string",
]

DEFAULT_SHEET_TITLE = "Sheet1"

logger = logging.getLogger(__name__)


class RowNotFoundError(LookupError):
    """Raised by overwrite when no row matches case_no + customer_name."""

    def __init__(self, case_no: str, customer_name: str) -> None:
        super().__init__(f"row not found: caseNo={case_no!r} customerName={customer_name!r}")
        self.case_no = case_no
        self.customer_name = customer_name


@dataclass(frozen=True)
class RowResult:
    row_index: int  # 1-based sheet row (2 == first data row)
    record: FormRecord


def cell_to_string(value: Any) -> str:
    """Render a cell value the way it is compared and returned to callers."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class RowStore:
    """Find-or-append store over a single ``.xlsx`` file.

    Public contract: ``ensure_workbook``, ``find_row``, ``add_row``,
    ``overwrite_row``, ``read_row``.
    """

    def __init__(self, workbook_path: Path) -> None:
        self.workbook_path = Path(workbook_path)

    # ---- workbook lifecycle -------------------------------------------------

    def ensure_workbook(self) -> tuple[Workbook, Worksheet]:
        """Open (or create) the workbook and repair its header row.

        A new file gets exactly the canonical header row. An existing file
        keeps its header positions; missing canonical labels are appended to
        the right and the repaired file is saved.
        """
        self.workbook_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.workbook_path.exists():
            workbook = Workbook()
            worksheet = workbook.active
            worksheet.title = DEFAULT_SHEET_TITLE
            worksheet.append(list(CANONICAL_HEADERS))
            self._save(workbook)
            logger.info(f"created workbook: {self.workbook_path}")
            return workbook, worksheet

        workbook = load_workbook(self.workbook_path)
        if workbook.worksheets:
            worksheet = workbook.worksheets[0]
        else:  # pragma: no cover - openpyxl refuses to save sheetless books
            worksheet = workbook.create_sheet(DEFAULT_SHEET_TITLE)
        appended = ensure_header_row(worksheet)
        if appended:
            self._save(workbook)
            logger.info(f"header row repaired, appended: {appended}")
        return workbook, worksheet

    def _save(self, workbook: Workbook) -> None:
        # temp sibling + os.replace: an interrupted save leaves the old file
        tmp_path = self.workbook_path.with_name(f".{self.workbook_path.name}.tmp")
        try:
            workbook.save(tmp_path)
            os.replace(tmp_path, self.workbook_path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    # ---- cell access ----------------------------------------------------------

    def _get(self, worksheet: Worksheet, row_index: int, key: str) -> str:
        column = resolve_column(header_values(worksheet), HEADER_MAP[key])
        if column is None:
            return ""
        return cell_to_string(worksheet.cell(row=row_index, column=column).value)

    def _set(self, worksheet: Worksheet, row_index: int, key: str, value: Any) -> None:
        column = resolve_column(header_values(worksheet), HEADER_MAP[key])
        if column is None:
            return
        # assign through .value: cell(value=None) would leave the old content
        worksheet.cell(row=row_index, column=column).value = None if value == "" else value

    def _apply(self, worksheet: Worksheet, row_index: int, form: FormRecord) -> None:
        primary, *extras = normalize_sample_items(form.sample_items)
        for key in HEADER_MAP:
            if key == "sample_no":
                value: Any = primary.sample_no
            elif key == "sample_name":
                value = primary.sample_name
            elif key == "remark":
                value = build_remark(primary.remark, extras)
            else:
                value = getattr(form, key)
            self._set(worksheet, row_index, key, value)

    def _to_record(self, worksheet: Worksheet, row_index: int) -> FormRecord:
        parsed = parse_remark(self._get(worksheet, row_index, "remark"))
        primary = SampleItem(
            sample_no=self._get(worksheet, row_index, "sample_no"),
            sample_name=self._get(worksheet, row_index, "sample_name"),
            remark=parsed.remark,
        )
        items = (primary, *parsed.extra_samples)[:MAX_SAMPLE_ITEMS]
        total_in_qty = parse_number(self._get(worksheet, row_index, "total_in_qty"))
        return FormRecord(
            case_no=self._get(worksheet, row_index, "case_no"),
            quote_no=self._get(worksheet, row_index, "quote_no"),
            customer_name=self._get(worksheet, row_index, "customer_name"),
            product_name=self._get(worksheet, row_index, "product_name"),
            model=self._get(worksheet, row_index, "model"),
            sales=self._get(worksheet, row_index, "sales"),
            in_operator=self._get(worksheet, row_index, "in_operator"),
            in_date=self._get(worksheet, row_index, "in_date"),
            total_in_qty=0 if total_in_qty is None else total_in_qty,
            sample_items=items,
            borrow_date=self._get(worksheet, row_index, "borrow_date"),
            borrower=self._get(worksheet, row_index, "borrower"),
            return_date=self._get(worksheet, row_index, "return_date"),
            return_operator=self._get(worksheet, row_index, "return_operator"),
            out_date=self._get(worksheet, row_index, "out_date"),
            out_qty=parse_number(self._get(worksheet, row_index, "out_qty")),
        )

    # ---- lookup ---------------------------------------------------------------

    def _find(self, worksheet: Worksheet, case_no: str, customer_name: str) -> int | None:
        headers = header_values(worksheet)
        case_col = resolve_column(headers, HEADER_MAP["case_no"])
        customer_col = resolve_column(headers, HEADER_MAP["customer_name"])
        if case_col is None or customer_col is None:
            return None
        wanted_case = (case_no or "").strip()
        wanted_customer = (customer_name or "").strip()
        # linear scan, first match wins
        for row_index in range(2, worksheet.max_row + 1):
            case_value = cell_to_string(worksheet.cell(row=row_index, column=case_col).value).strip()
            if case_value != wanted_case:
                continue
            customer_value = cell_to_string(
                worksheet.cell(row=row_index, column=customer_col).value
            ).strip()
            if customer_value == wanted_customer:
                return row_index
        return None

    def find_row(self, case_no: str, customer_name: str) -> int | None:
        _, worksheet = self.ensure_workbook()
        row_index = self._find(worksheet, case_no, customer_name)
        logger.debug(f"find_row caseNo={case_no!r} customerName={customer_name!r} -> {row_index}")
        return row_index

    # ---- operations -------------------------------------------------------------

    def read_row(self, case_no: str, customer_name: str) -> RowResult | None:
        _, worksheet = self.ensure_workbook()
        row_index = self._find(worksheet, case_no, customer_name)
        if row_index is None:
            logger.debug(f"read_row: no row for caseNo={case_no!r} customerName={customer_name!r}")
            return None
        return RowResult(row_index=row_index, record=self._to_record(worksheet, row_index))

    def add_row(self, form: FormRecord) -> RowResult:
        """Append ``form`` as a new row. No duplicate-key check is made."""
        missing = get_missing_fields(form)
        if missing:
            raise ValidationError(missing)

        workbook, worksheet = self.ensure_workbook()
        record = replace(form, sample_items=normalize_sample_items(form.sample_items))
        row_index = worksheet.max_row + 1
        self._apply(worksheet, row_index, record)
        self._save(workbook)
        logger.info(
            f"appended row {row_index}: caseNo={record.case_no!r} customerName={record.customer_name!r}"
        )
        return RowResult(row_index=row_index, record=record)

    def overwrite_row(self, form: FormRecord) -> RowResult:
        """Merge ``form`` onto the stored row with the same key, in place."""
        workbook, worksheet = self.ensure_workbook()
        row_index = self._find(worksheet, form.case_no, form.customer_name)
        if row_index is None:
            raise RowNotFoundError(form.case_no, form.customer_name)

        existing = self._to_record(worksheet, row_index)
        merged = merge_records(existing, form)
        missing = get_missing_fields(merged)
        if missing:
            raise ValidationError(missing)

        self._apply(worksheet, row_index, merged)
        self._save(workbook)
        logger.info(
            f"overwrote row {row_index}: caseNo={merged.case_no!r} customerName={merged.customer_name!r}"
        )
        return RowResult(row_index=row_index, record=merged)
