"""Tests for choosing the stock ledger's database per environment."""

import pytest
from protean.exceptions import ConfigurationError
from storefront.inventory import DEFAULT_LEDGER_URI, get_ledger, ledger_uri, reset_ledger


class TestLedgerUri:
    def test_explicit_uri_wins(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.setenv("STOCK_LEDGER_URI", "postgresql://shop@db/storefront")
        assert ledger_uri() == "postgresql://shop@db/storefront"

    def test_local_sqlite_outside_production(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "test")
        monkeypatch.delenv("STOCK_LEDGER_URI", raising=False)
        assert ledger_uri() == DEFAULT_LEDGER_URI

    def test_production_requires_uri(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.delenv("STOCK_LEDGER_URI", raising=False)
        with pytest.raises(ConfigurationError):
            ledger_uri()

    def test_get_ledger_fails_fast_in_production(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.delenv("STOCK_LEDGER_URI", raising=False)
        reset_ledger()
        with pytest.raises(ConfigurationError):
            get_ledger()

    def test_get_ledger_builds_from_uri(self, monkeypatch, tmp_path):
        uri = f"sqlite:///{tmp_path / 'configured.db'}"
        monkeypatch.setenv("STOCK_LEDGER_URI", uri)
        reset_ledger()

        ledger = get_ledger()
        try:
            assert ledger.database_uri == uri
            assert get_ledger() is ledger
            ledger.register("var-001", 2)
            assert ledger.level("var-001").stock_quantity == 2
        finally:
            ledger.dispose()
