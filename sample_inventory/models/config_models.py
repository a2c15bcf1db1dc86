from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

"""Config dataclasses for the sample inventory ledger.

These are filled by ``sample_inventory.config.loader`` and only carry typed
values plus the derived paths every other layer needs.
"""

DEFAULT_WORKBOOK_NAME = "QE-02-01.xlsx"
DEFAULT_LABEL_COLUMNS = 4


@dataclass(frozen=True)
class TemplateConfig:
    """File names of the three document templates (inside ``template_dir``)."""
    intake_return: str = "QE-02-04 樣品入庫歸還單(Rev01).docx"
    outer_box: str = "外箱標誌.docx"
    labels: str = "樣品小標籤.docx"

    def filename(self, kind: str) -> str:
        if kind not in ("intake_return", "outer_box", "labels"):
            raise ValueError(f"unknown document kind: {kind}")
        return getattr(self, kind)


@dataclass(frozen=True)
class LedgerConfig:
    """Root configuration object.

    ``data_dir`` may be overridden by the DATA_DIR environment variable; that
    is resolved by the loader before this object is built.
    """
    data_dir: Path
    workbook_name: str = DEFAULT_WORKBOOK_NAME
    template_dir: Path | None = None
    templates: TemplateConfig = field(default_factory=TemplateConfig)
    label_columns_per_row: int = DEFAULT_LABEL_COLUMNS

    @property
    def workbook_path(self) -> Path:
        return self.data_dir / self.workbook_name

    @property
    def resolved_template_dir(self) -> Path:
        return self.template_dir if self.template_dir is not None else self.data_dir / "templates"

    def template_path(self, kind: str) -> Path:
        return self.resolved_template_dir / self.templates.filename(kind)
