from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

"""FormRecord / SampleItem domain models.

A FormRecord is one logical inventory entry: case header fields, 1..10 sample
items and the borrow / return / out tracking fields. It is the only data
currency of the row store; the label and document services read it as well.

External payloads (the intake form, JSON files given to the CLI) use camelCase
keys. Those keys are part of the data contract and are mapped to snake_case
attribute names here and nowhere else.
"""

__all__ = [
    "SampleItem",
    "FormRecord",
    "FIELD_KEYS",
    "STRING_FIELDS",
    "NUMBER_FIELDS",
    "parse_number",
    "coerce_qty",
]

# attribute name -> payload key
FIELD_KEYS: dict[str, str] = {
    "case_no": "caseNo",
    "quote_no": "quoteNo",
    "customer_name": "customerName",
    "product_name": "productName",
    "model": "model",
    "sales": "sales",
    "in_operator": "inOperator",
    "in_date": "inDate",
    "total_in_qty": "totalInQty",
    "borrow_date": "borrowDate",
    "borrower": "borrower",
    "return_date": "returnDate",
    "return_operator": "returnOperator",
    "out_date": "outDate",
    "out_qty": "outQty",
}

NUMBER_FIELDS = ("total_in_qty", "out_qty")
STRING_FIELDS = tuple(k for k in FIELD_KEYS if k not in NUMBER_FIELDS)


def parse_number(value: Any) -> int | float | None:
    """Coerce a cell or payload value to a number.

    None, empty strings, NaN and unparsable text all become None. Integral
    floats collapse to int so that ``3.0`` read back from a sheet equals ``3``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(num):
        return None
    if num.is_integer():
        return int(num)
    return num


def coerce_qty(value: Any) -> int:
    """Positive integer quantity; anything missing or invalid becomes 1."""
    num = parse_number(value)
    if num is None or math.isinf(num):
        return 1
    num = math.floor(num)
    return num if num >= 1 else 1


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class SampleItem:
    sample_no: str = ""
    sample_name: str = ""
    qty: int = 1
    remark: str = ""

    @staticmethod
    def from_payload(data: dict[str, Any]) -> SampleItem:
        return SampleItem(
            sample_no=_as_text(data.get("sampleNo")),
            sample_name=_as_text(data.get("sampleName")),
            qty=coerce_qty(data.get("qty")),
            remark=_as_text(data.get("remark")),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "sampleNo": self.sample_no,
            "sampleName": self.sample_name,
            "qty": self.qty,
            "remark": self.remark,
        }

    def is_blank(self) -> bool:
        # qty always carries a default, so it does not count as content
        return not (self.sample_no or self.sample_name or self.remark)


@dataclass(frozen=True)
class FormRecord:
    """One logical inventory entry.

    ``case_no`` + ``customer_name`` form the lookup key. Uniqueness is not
    enforced by storage; the first matching row wins.
    """
    case_no: str = ""
    quote_no: str = ""
    customer_name: str = ""
    product_name: str = ""
    model: str = ""
    sales: str = ""
    in_operator: str = ""
    in_date: str = ""
    total_in_qty: int | float | None = None
    sample_items: tuple[SampleItem, ...] = field(default_factory=tuple)
    borrow_date: str = ""
    borrower: str = ""
    return_date: str = ""
    return_operator: str = ""
    out_date: str = ""
    out_qty: int | float | None = None

    @property
    def primary_sample(self) -> SampleItem | None:
        return self.sample_items[0] if self.sample_items else None

    @property
    def extra_samples(self) -> tuple[SampleItem, ...]:
        return self.sample_items[1:]

    @staticmethod
    def from_payload(data: dict[str, Any]) -> FormRecord:
        """Build a record from a camelCase payload.

        Absent keys stay at their "unset" defaults (empty string / None / no
        sample items) which is what the overwrite merge relies on.

        Raises:
            ValueError: ``sampleItems`` is present but not a list.
        """
        values: dict[str, Any] = {}
        for attr, key in FIELD_KEYS.items():
            raw = data.get(key)
            if attr in NUMBER_FIELDS:
                values[attr] = parse_number(raw)
            else:
                values[attr] = _as_text(raw)
        raw_items = data.get("sampleItems") or []
        if not isinstance(raw_items, list):
            raise ValueError(f"sampleItems must be a list, got {type(raw_items).__name__}")
        values["sample_items"] = tuple(
            SampleItem.from_payload(item) for item in raw_items if isinstance(item, dict)
        )
        return FormRecord(**values)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {key: getattr(self, attr) for attr, key in FIELD_KEYS.items()}
        payload["sampleItems"] = [item.to_payload() for item in self.sample_items]
        return payload
