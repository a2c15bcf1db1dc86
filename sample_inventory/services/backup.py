from __future__ import annotations

import logging
import shutil
from datetime import UTC, datetime
from pathlib import Path

"""Whole-file replace of the ledger workbook with a timestamped backup.

This is the administrative upload boundary, not part of the row store. It is
not serialized against row operations; callers schedule it themselves.
"""

__all__ = [
    "TIMESTAMP_FMT",
    "backup_path_for",
    "replace_workbook",
]

TIMESTAMP_FMT = "%Y%m%d%H%M%S"

logger = logging.getLogger(__name__)


def backup_path_for(workbook_path: Path, now: datetime | None = None) -> Path:
    stamp = (now or datetime.now(UTC)).strftime(TIMESTAMP_FMT)
    return workbook_path.with_name(f"{workbook_path.stem}-backup-{stamp}{workbook_path.suffix}")


def replace_workbook(workbook_path: Path, source: Path) -> Path | None:
    """Overwrite ``workbook_path`` with the bytes of ``source``.

    The current workbook, if any, is first copied to
    ``<stem>-backup-<YYYYMMDDHHMMSS>.xlsx`` next to it.

    Returns:
        The backup path, or None when there was no workbook to back up.

    Raises:
        ValueError: ``source`` is not an ``.xlsx`` file.
    """
    if not source.name.endswith(".xlsx"):
        raise ValueError(f"only .xlsx files are allowed: {source.name}")
    data = source.read_bytes()

    workbook_path.parent.mkdir(parents=True, exist_ok=True)
    backup: Path | None = None
    if workbook_path.exists():
        backup = backup_path_for(workbook_path)
        shutil.copy2(workbook_path, backup)
        logger.info(f"backed up {workbook_path.name} -> {backup.name}")

    workbook_path.write_bytes(data)
    logger.info(f"replaced workbook {workbook_path} from {source}")
    return backup
