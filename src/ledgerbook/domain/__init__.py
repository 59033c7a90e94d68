"""Domain layer for ledgerbook application.

The ledger core (``hierarchy``, ``balances``, ``statement``, ``reports``)
is pure; the services wrap it with persistence. Services are imported
lazily so that ``ledgerbook.database`` can import the entities without a
circular import through this package.
"""

_SERVICES = {
    "AccountService": "ledgerbook.domain.account",
    "TransactionService": "ledgerbook.domain.transaction",
    "PartyService": "ledgerbook.domain.party",
    "AssetService": "ledgerbook.domain.asset",
    "ReportService": "ledgerbook.domain.reporting",
    "ScheduleService": "ledgerbook.domain.scheduling",
    "ReceivableService": "ledgerbook.domain.receivable",
    "BudgetService": "ledgerbook.domain.budget",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
