"""Sample inventory ledger: spreadsheet row store and label expander."""

__version__ = "0.1.0"
