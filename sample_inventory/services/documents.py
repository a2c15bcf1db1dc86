from __future__ import annotations

from pathlib import Path
from typing import Any

from ..models.config_models import LedgerConfig
from ..models.form_record import FormRecord
from .labels import build_label_rows, build_labels_from_form
from .validation import ValidationError, missing_document_fields, normalize_sample_items

"""Template payloads for the three printed documents.

The template engine itself is external; this module only builds the flat
key/value (or array-of-rows) payload it is filled with and the download
file name.
"""

__all__ = [
    "DOCUMENT_KINDS",
    "TemplateNotFoundError",
    "intake_return_payload",
    "outer_box_payload",
    "label_sheet_payload",
    "build_payload",
    "document_filename",
    "template_path",
]

# kind -> (file name prefix, required attributes)
DOCUMENT_KINDS: dict[str, tuple[str, tuple[str, ...]]] = {
    "intake_return": (
        "QE-02-04",
        ("case_no", "customer_name", "in_operator", "in_date", "total_in_qty"),
    ),
    "outer_box": (
        "外箱標誌",
        ("case_no", "quote_no", "customer_name", "model", "total_in_qty", "in_date"),
    ),
    "labels": (
        "樣品小標籤",
        ("case_no", "customer_name", "model", "in_date"),
    ),
}


class TemplateNotFoundError(FileNotFoundError):
    pass


def _require(form: FormRecord, kind: str) -> None:
    _, required = DOCUMENT_KINDS[kind]
    missing = missing_document_fields(form, required)
    if missing:
        raise ValidationError(missing)


def intake_return_payload(form: FormRecord) -> dict[str, Any]:
    _require(form, "intake_return")
    return {
        "inOperator": form.in_operator,
        "inDate": form.in_date,
        "returnOperator": form.return_operator,
        "returnDate": form.return_date,
        "customerName": form.customer_name,
        "caseNo": form.case_no,
        "totalInQty": form.total_in_qty,
        "samples": [item.to_payload() for item in normalize_sample_items(form.sample_items)],
    }


def outer_box_payload(form: FormRecord) -> dict[str, Any]:
    _require(form, "outer_box")
    return {
        "caseNo": form.case_no,
        "quoteNo": form.quote_no,
        "customerName": form.customer_name,
        "model": form.model,
        "totalInQty": form.total_in_qty,
        "inDate": form.in_date,
    }


def label_sheet_payload(form: FormRecord, columns_per_row: int) -> dict[str, Any]:
    _require(form, "labels")
    rows = build_label_rows(build_labels_from_form(form), columns_per_row)
    return {
        "labelCaseNo": form.case_no,
        "customerName": form.customer_name,
        "model": form.model,
        "inDate": form.in_date,
        "rows": [[slot.to_payload() if slot is not None else None for slot in row] for row in rows],
    }


def build_payload(kind: str, form: FormRecord, config: LedgerConfig) -> dict[str, Any]:
    if kind == "intake_return":
        return intake_return_payload(form)
    if kind == "outer_box":
        return outer_box_payload(form)
    if kind == "labels":
        return label_sheet_payload(form, config.label_columns_per_row)
    raise ValueError(f"unknown document kind: {kind}")


def document_filename(kind: str, form: FormRecord) -> str:
    prefix, _ = DOCUMENT_KINDS[kind]
    return f"{prefix}_{form.case_no or 'unknown'}_{form.in_date or 'date'}.docx"


def template_path(config: LedgerConfig, kind: str) -> Path:
    path = config.template_path(kind)
    if not path.exists():
        raise TemplateNotFoundError(f"template not found: {path}")
    return path
