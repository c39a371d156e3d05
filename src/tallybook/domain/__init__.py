"""Domain layer for tallybook application."""

# Services are imported lazily: the database layer imports
# tallybook.domain.entities, and the services import the database layer.
_SERVICES = {
    "TransactionService": "tallybook.domain.transaction",
    "AccountService": "tallybook.domain.account",
    "ReportService": "tallybook.domain.reports",
    "FixedAssetService": "tallybook.domain.assets",
    "ReconciliationService": "tallybook.domain.reconciliation",
    "SpreadsheetImportService": "tallybook.domain.spreadsheet_import",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
