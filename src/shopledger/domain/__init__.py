"""Domain layer for shopledger application."""

# Services are imported lazily: the database layer imports domain entities,
# and the services import the database layer.
_SERVICES = {
    "EntryLedgerService": "shopledger.domain.ledger",
    "StockService": "shopledger.domain.inventory",
    "SettingsService": "shopledger.domain.settings",
    "TransferService": "shopledger.domain.transfer",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        module = importlib.import_module(_SERVICES[name])
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
