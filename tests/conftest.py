# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import json
import pytest

from sample_inventory.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    # handlers bind sys.stdout at setup time; rebind per test for capsys
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "data" / "templates").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("DATA_DIR", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """data_dir: ./data
workbook_name: QE-02-01.xlsx
template_dir: ./data/templates
label_columns_per_row: 3
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "inventory.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def workbook_path(temp_workdir: Path) -> Path:
    return temp_workdir / "data" / "QE-02-01.xlsx"


@pytest.fixture()
def sample_payload() -> dict:
    return {
        "caseNo": "C100",
        "quoteNo": "Q-2025-001",
        "customerName": "ACME",
        "productName": "Sensor",
        "model": "X1",
        "sales": "Lin",
        "inOperator": "Chen",
        "inDate": "2025-12-01",
        "totalInQty": 5,
        "sampleItems": [
            {"sampleNo": "S-001", "sampleName": "Widget", "qty": 3, "remark": "fragile"},
            {"sampleNo": "S-010", "sampleName": "Bracket", "qty": 2, "remark": ""},
        ],
        "borrowDate": "",
        "borrower": "",
        "returnDate": "",
        "returnOperator": "",
        "outDate": "",
        "outQty": None,
    }


@pytest.fixture()
def write_payload(temp_workdir: Path):
    def _write(data: dict, name: str = "payload.json") -> Path:
        p = temp_workdir / name
        p.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return p
    return _write
