"""Stock ledger factory.

Provides get_ledger() / set_ledger() to swap implementations. The default
ledger is a SqlStockLedger on STOCK_LEDGER_URI. Outside production an unset
URI falls back to a local SQLite file; under PROTEAN_ENV=production the URI
is required, since the domain itself moves to PostgreSQL there. Tests
install a ledger on a temporary database.
"""

import os

from protean.exceptions import ConfigurationError

from storefront.inventory.port import StockLedger
from storefront.inventory.sql_ledger import SqlStockLedger

DEFAULT_LEDGER_URI = "sqlite:///storefront_stock.db"

_current_ledger: StockLedger | None = None


def ledger_uri() -> str:
    """SQLAlchemy URL of the stock ledger for the current environment."""
    uri = os.getenv("STOCK_LEDGER_URI")
    if uri:
        return uri
    if os.getenv("PROTEAN_ENV", "").lower() == "production":
        raise ConfigurationError("STOCK_LEDGER_URI must be set when PROTEAN_ENV=production")
    return DEFAULT_LEDGER_URI


def get_ledger() -> StockLedger:
    """Return the active stock ledger, creating the default one on first use."""
    global _current_ledger
    if _current_ledger is None:
        ledger = SqlStockLedger(ledger_uri())
        ledger.create_schema()
        _current_ledger = ledger
    return _current_ledger


def set_ledger(ledger: StockLedger) -> None:
    """Override the active stock ledger (useful for tests)."""
    global _current_ledger
    _current_ledger = ledger


def reset_ledger() -> None:
    global _current_ledger
    _current_ledger = None
