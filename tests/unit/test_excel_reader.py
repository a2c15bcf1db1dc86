from __future__ import annotations
import pandas as pd
from pathlib import Path
from sample_inventory.excel.reader import read_ledger_frame, preview_rows


def _make_excel(tmp_path: Path, name: str, rows: list[list[object]]) -> Path:
    p = tmp_path / name
    with pd.ExcelWriter(p) as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Sheet1", header=False, index=False)
    return p


def test_read_ledger_frame_renames_canonical_headers(temp_workdir: Path):
    excel = _make_excel(
        temp_workdir, "ledger.xlsx",
        [
            ["樣品總編號", " 客戶名稱 ", "自訂欄位"],
            ["C100", "ACME", "x"],
            ["C101", "Globex", None],
        ],
    )
    df = read_ledger_frame(excel)
    assert list(df.columns) == ["case_no", "customer_name", "自訂欄位"]
    assert len(df) == 2
    assert df.loc[0, "case_no"] == "C100"


def test_read_ledger_frame_drops_empty_rows(temp_workdir: Path):
    excel = _make_excel(
        temp_workdir, "gaps.xlsx",
        [
            ["樣品總編號", "客戶名稱"],
            ["C100", "ACME"],
            [None, None],
            ["C101", "Globex"],
        ],
    )
    df = read_ledger_frame(excel)
    # fully empty rows are dropped
    assert list(df["case_no"]) == ["C100", "C101"]


def test_preview_rows_json_friendly(temp_workdir: Path):
    excel = _make_excel(
        temp_workdir, "preview.xlsx",
        [
            ["樣品總編號", "入庫日期", "樣品出庫數"],
            ["C100", pd.Timestamp("2025-12-01"), None],
            ["C101", pd.Timestamp("2025-12-02"), 2],
        ],
    )
    rows = preview_rows(read_ledger_frame(excel), 1)
    assert len(rows) == 1
    assert rows[0]["case_no"] == "C100"
    assert rows[0]["in_date"].startswith("2025-12-01")
    assert rows[0]["out_qty"] is None
