from __future__ import annotations

from ..excel.row_store import RowResult

"""SUMMARY line rendering for row store results.

The body is logged at the SUMMARY level, so the printed line reads::

    SUMMARY action={action} row={row} case_no={case_no} customer={customer} samples={n}
"""


def render_summary_line(action: str, result: RowResult) -> str:
    """Render the SUMMARY body for an add / overwrite / read result.

    Examples:
        >>> from sample_inventory.models import FormRecord, SampleItem
        >>> rec = FormRecord(case_no="C100", customer_name="ACME", sample_items=(SampleItem("S-001"),))
        >>> render_summary_line("add", RowResult(row_index=2, record=rec))
        'action=add row=2 case_no=C100 customer=ACME samples=1'
    """
    record = result.record
    return (
        f"action={action} "
        f"row={result.row_index} "
        f"case_no={record.case_no} "
        f"customer={record.customer_name} "
        f"samples={len(record.sample_items)}"
    )
