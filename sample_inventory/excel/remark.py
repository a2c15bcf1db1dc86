from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..models.form_record import SampleItem

"""Overflow encoding of extra sample items inside the primary remark cell.

Cell layout when extras exist::

    <main remark>\\n[ExtraSamples]:<JSON array of extra items>

The ledger is a flat table, so items 2..10 ride along in this one text cell.
A user remark that itself contains the marker is indistinguishable from an
encoded one; there is no escape mechanism.
"""

__all__ = [
    "EXTRA_SAMPLES_MARK",
    "ParsedRemark",
    "build_remark",
    "parse_remark",
]

EXTRA_SAMPLES_MARK = "[ExtraSamples]:"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedRemark:
    remark: str
    extra_samples: tuple[SampleItem, ...] = ()


def build_remark(primary_remark: str, extra_samples: Sequence[SampleItem]) -> str:
    extras = [item for item in extra_samples if not item.is_blank()]
    if not extras:
        return primary_remark
    encoded = json.dumps([item.to_payload() for item in extras], ensure_ascii=False)
    return f"{primary_remark or ''}\n{EXTRA_SAMPLES_MARK}{encoded}"


def parse_remark(raw: str | None) -> ParsedRemark:
    """Split a stored remark cell back into main remark and extra items.

    Never raises: a missing marker, a tail that is not valid JSON or not a
    JSON array of objects all yield the whole cell as remark with no extras.
    """
    if not raw:
        return ParsedRemark(remark="")
    marker_index = raw.find(EXTRA_SAMPLES_MARK)
    if marker_index == -1:
        return ParsedRemark(remark=raw)

    main_remark = raw[:marker_index].strip()
    tail = raw[marker_index + len(EXTRA_SAMPLES_MARK):].strip()
    try:
        parsed = json.loads(tail)
    except json.JSONDecodeError as e:
        logger.warning(f"extra samples tail is not valid JSON, keeping cell as remark: {e}")
        return ParsedRemark(remark=raw)
    if not isinstance(parsed, list) or not all(isinstance(i, dict) for i in parsed):
        logger.warning("extra samples tail is not a JSON array of objects, keeping cell as remark")
        return ParsedRemark(remark=raw)
    return ParsedRemark(
        remark=main_remark,
        extra_samples=tuple(SampleItem.from_payload(i) for i in parsed),
    )
