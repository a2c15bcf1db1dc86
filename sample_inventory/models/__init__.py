"""Domain models for the sample inventory ledger.

Form records and sample items are what the row store persists; label records
are what the label expander produces; the config models carry the settings.
"""

from .config_models import LedgerConfig, TemplateConfig
from .form_record import FormRecord, SampleItem
from .label import LabelRecord

__all__ = [
    # Configuration models
    "LedgerConfig",
    "TemplateConfig",
    # Record models
    "FormRecord",
    "SampleItem",
    "LabelRecord",
]
