from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from dotenv import load_dotenv
from openpyxl.utils.exceptions import InvalidFileException

from sample_inventory.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from sample_inventory.excel.headers import HEADER_MAP, header_values, resolve_column
from sample_inventory.excel.reader import preview_rows, read_ledger_frame
from sample_inventory.excel.row_store import RowNotFoundError, RowStore
from sample_inventory.logging.init import log_summary, setup_logging
from sample_inventory.models.config_models import LedgerConfig
from sample_inventory.models.form_record import FormRecord
from sample_inventory.services.backup import replace_workbook
from sample_inventory.services.documents import (
    DOCUMENT_KINDS,
    TemplateNotFoundError,
    build_payload,
    document_filename,
    template_path,
)
from sample_inventory.services.labels import build_label_rows, build_labels_from_form
from sample_inventory.services.summary import render_summary_line
from sample_inventory.services.validation import ValidationError

"""CLI entrypoint.

Stands where the HTTP routes of the intake form would: every command maps to
one row store / label / document operation and reports the outcome through
the exit code and a SUMMARY line.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_VALIDATION = 2
EXIT_NOT_FOUND = 3


class PayloadError(Exception):
    pass


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; its values win over the existing environment (DATA_DIR)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Sample inventory ledger (QE-02-01)")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Append a new record")
    add.add_argument("--payload", type=Path, required=True)

    overwrite = sub.add_parser("overwrite", help="Merge a payload onto an existing record")
    overwrite.add_argument("--payload", type=Path, required=True)

    read = sub.add_parser("read", help="Read a record by case number + customer")
    read.add_argument("--case-no", required=True)
    read.add_argument("--customer", required=True)
    read.add_argument("--output", type=Path)

    labels = sub.add_parser("labels", help="Build the small-label sheet rows")
    labels.add_argument("--payload", type=Path, required=True)
    labels.add_argument("--columns", type=int)
    labels.add_argument("--output", type=Path)

    docs = sub.add_parser("documents", help="Build a document template payload")
    docs.add_argument("--payload", type=Path, required=True)
    docs.add_argument("--kind", choices=sorted(DOCUMENT_KINDS), required=True)
    docs.add_argument("--output", type=Path)

    replace = sub.add_parser("replace", help="Replace the whole workbook (with backup)")
    replace.add_argument("--file", type=Path, required=True)

    inspect = sub.add_parser("inspect", help="Print header mapping and first rows")
    inspect.add_argument("--rows", type=int, default=3)
    return p.parse_args(argv)


def _read_payload(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise PayloadError(f"cannot read payload {path}: {e}") from e
    if not isinstance(data, dict):
        raise PayloadError(f"payload must be a JSON object: {path}")
    return data


def _emit(data: Any, output: Path | None) -> None:
    text = json.dumps(data, ensure_ascii=False, indent=2, default=str)
    if output is None:
        print(text)
    else:
        output.write_text(text + "\n", encoding="utf-8")


def _run(args: argparse.Namespace, cfg: LedgerConfig) -> int:
    logger = setup_logging()
    store = RowStore(cfg.workbook_path)

    if args.command == "add":
        form = FormRecord.from_payload(_read_payload(args.payload))
        result = store.add_row(form)
        log_summary(render_summary_line("add", result))
        return EXIT_SUCCESS

    if args.command == "overwrite":
        form = FormRecord.from_payload(_read_payload(args.payload))
        if not form.case_no.strip() or not form.customer_name.strip():
            logger.error("overwrite: caseNo and customerName are required")
            return EXIT_VALIDATION
        result = store.overwrite_row(form)
        log_summary(render_summary_line("overwrite", result))
        return EXIT_SUCCESS

    if args.command == "read":
        if not args.case_no.strip() or not args.customer.strip():
            logger.error("read: caseNo and customerName are required")
            return EXIT_VALIDATION
        result = store.read_row(args.case_no, args.customer)
        if result is None:
            logger.error(f"read: no row for caseNo={args.case_no} customerName={args.customer}")
            return EXIT_NOT_FOUND
        _emit({"rowIndex": result.row_index, "data": result.record.to_payload()}, args.output)
        log_summary(render_summary_line("read", result))
        return EXIT_SUCCESS

    if args.command == "labels":
        form = FormRecord.from_payload(_read_payload(args.payload))
        columns = cfg.label_columns_per_row if args.columns is None else args.columns
        rows = build_label_rows(build_labels_from_form(form), columns)
        _emit([[s.to_payload() if s is not None else None for s in row] for row in rows], args.output)
        return EXIT_SUCCESS

    if args.command == "documents":
        form = FormRecord.from_payload(_read_payload(args.payload))
        payload = build_payload(args.kind, form, cfg)
        try:
            template: str | None = str(template_path(cfg, args.kind))
        except TemplateNotFoundError as e:
            logger.warning(str(e))
            template = None
        _emit(
            {"template": template, "filename": document_filename(args.kind, form), "data": payload},
            args.output,
        )
        return EXIT_SUCCESS

    if args.command == "replace":
        backup = replace_workbook(cfg.workbook_path, args.file)
        if backup is not None:
            logger.info(f"backup: {backup}")
        return EXIT_SUCCESS

    if args.command == "inspect":
        if not cfg.workbook_path.exists():
            print(f"inspect: workbook not found: {cfg.workbook_path}")
            return EXIT_FATAL
        _, worksheet = store.ensure_workbook()
        print(f"FILE: {cfg.workbook_path.name} SHEET: {worksheet.title}")
        headers = header_values(worksheet)
        for key, label in HEADER_MAP.items():
            column = resolve_column(headers, label)
            print(f"  {key}: {label} -> column {column}")
        df = read_ledger_frame(cfg.workbook_path)
        print(f"  rows={len(df)}")
        print("  sample_rows=", json.dumps(preview_rows(df, args.rows), ensure_ascii=False, default=str))
        return EXIT_SUCCESS

    raise ValueError(f"unknown command: {args.command}")  # pragma: no cover


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read sys.argv when no argv is given (tests call main([...]))
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        return _run(args, cfg)
    except ValidationError as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_VALIDATION
    except RowNotFoundError as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_NOT_FOUND
    except PayloadError as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL
    except (OSError, ValueError, InvalidFileException, BadZipFile) as e:
        logger.error(f"{args.command}: {e}")
        return EXIT_FATAL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
