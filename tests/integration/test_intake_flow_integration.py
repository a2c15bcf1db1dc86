from __future__ import annotations

import json
from pathlib import Path

from openpyxl import load_workbook

from sample_inventory.cli import main as cli_main
from sample_inventory.excel.row_store import RowStore
from sample_inventory.models import FormRecord
from sample_inventory.services.labels import build_labels_from_form

"""End-to-end intake flow: add -> read -> labels -> borrow/return overwrite."""


def test_add_then_labels_scenario(write_config, write_payload, temp_workdir: Path):
    payload = {
        "caseNo": "C100",
        "quoteNo": "Q1",
        "customerName": "ACME",
        "productName": "Sensor",
        "model": "X1",
        "sales": "Lin",
        "inOperator": "Chen",
        "inDate": "2025-12-01",
        "totalInQty": 3,
        "sampleItems": [{"sampleNo": "S-001", "sampleName": "Widget", "qty": 3}],
    }
    assert cli_main(["add", "--payload", str(write_payload(payload))]) == 0

    out = temp_workdir / "read.json"
    assert cli_main(["read", "--case-no", "C100", "--customer", "ACME", "--output", str(out)]) == 0
    stored = json.loads(out.read_text(encoding="utf-8"))
    assert stored["rowIndex"] == 2

    labels = build_labels_from_form(FormRecord.from_payload(payload))
    assert [lb.code for lb in labels] == ["S-001", "S-002", "S-003"]


def test_borrow_and_return_cycle(write_config, write_payload, sample_payload, temp_workdir: Path):
    assert cli_main(["add", "--payload", str(write_payload(sample_payload))]) == 0

    borrow = {"caseNo": "C100", "customerName": "ACME", "borrowDate": "2025-12-05", "borrower": "Wang", "sampleItems": []}
    assert cli_main(["overwrite", "--payload", str(write_payload(borrow, "borrow.json"))]) == 0

    back = {"caseNo": "C100", "customerName": "ACME", "returnDate": "2025-12-09", "returnOperator": "Wang"}
    assert cli_main(["overwrite", "--payload", str(write_payload(back, "return.json"))]) == 0

    result = RowStore(temp_workdir / "data" / "QE-02-01.xlsx").read_row("C100", "ACME")
    rec = result.record
    assert (rec.borrower, rec.borrow_date) == ("Wang", "2025-12-05")
    assert (rec.return_operator, rec.return_date) == ("Wang", "2025-12-09")
    assert [i.sample_no for i in rec.sample_items] == ["S-001", "S-010"]
    ws = load_workbook(temp_workdir / "data" / "QE-02-01.xlsx").worksheets[0]
    assert ws.max_row == 2


def test_duplicate_adds_read_first_row(write_config, write_payload, sample_payload, temp_workdir: Path):
    assert cli_main(["add", "--payload", str(write_payload(sample_payload))]) == 0
    sample_payload["productName"] = "Second"
    assert cli_main(["add", "--payload", str(write_payload(sample_payload, "again.json"))]) == 0

    out = temp_workdir / "read.json"
    assert cli_main(["read", "--case-no", "C100", "--customer", "ACME", "--output", str(out)]) == 0
    stored = json.loads(out.read_text(encoding="utf-8"))
    assert stored["rowIndex"] == 2
    assert stored["data"]["productName"] == "Sensor"
