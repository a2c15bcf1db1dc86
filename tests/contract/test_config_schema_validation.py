from __future__ import annotations

import json

import jsonschema
import pytest
from jsonschema.exceptions import ValidationError

from sample_inventory.config.loader import SCHEMA_PATH

"""Config schema contract test."""


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_config_schema_valid_example():
    config = {
        "data_dir": "./data",
        "workbook_name": "QE-02-01.xlsx",
        "template_dir": "./data/templates",
        "templates": {
            "intake_return": "QE-02-04 樣品入庫歸還單(Rev01).docx",
            "outer_box": "外箱標誌.docx",
            "labels": "樣品小標籤.docx",
        },
        "label_columns_per_row": 4,
    }
    jsonschema.validate(config, _schema())


def test_config_schema_minimal_example():
    jsonschema.validate({"data_dir": "/srv/ledger"}, _schema())


def test_config_schema_missing_data_dir():
    with pytest.raises(ValidationError):
        jsonschema.validate({"workbook_name": "QE-02-01.xlsx"}, _schema())


def test_config_schema_rejects_non_xlsx_workbook():
    with pytest.raises(ValidationError):
        jsonschema.validate({"data_dir": "./data", "workbook_name": "ledger.csv"}, _schema())


def test_config_schema_rejects_unknown_template_kind():
    with pytest.raises(ValidationError):
        jsonschema.validate({"data_dir": "./data", "templates": {"poster": "p.docx"}}, _schema())
