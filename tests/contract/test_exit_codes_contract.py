from __future__ import annotations

from pathlib import Path

from sample_inventory.cli import main as cli_main

"""Exit code contract: 0 ok, 1 fatal, 2 validation, 3 not found."""


def test_exit_code_fatal_without_config(temp_workdir: Path, capsys):
    # no config/inventory.yml -> exit 1
    code = cli_main(["read", "--case-no", "C1", "--customer", "ACME"])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_success(write_config, write_payload, sample_payload):
    assert cli_main(["add", "--payload", str(write_payload(sample_payload))]) == 0


def test_exit_code_validation(write_config, write_payload):
    assert cli_main(["add", "--payload", str(write_payload({"caseNo": "C1"}))]) == 2


def test_exit_code_not_found(write_config):
    assert cli_main(["read", "--case-no", "C1", "--customer", "ACME"]) == 3


def test_exit_code_fatal_on_corrupt_workbook(write_config, temp_workdir: Path):
    (temp_workdir / "data" / "QE-02-01.xlsx").write_bytes(b"not a zip")
    assert cli_main(["read", "--case-no", "C1", "--customer", "ACME"]) == 1
