from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""LabelRecord model: one printable small label."""

__all__ = [
    "LabelRecord",
]


@dataclass(frozen=True)
class LabelRecord:
    code: str
    customer_name: str
    model: str
    in_date: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "customerName": self.customer_name,
            "model": self.model,
            "inDate": self.in_date,
        }
