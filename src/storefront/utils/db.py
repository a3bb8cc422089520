from protean.domain import Domain
from sqlalchemy import create_engine

from storefront.inventory import get_ledger

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def setup_db(domain: Domain):
    """Create the domain's tables and the stock ledger schema."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])

            # Touching each DAO registers its table on the provider's metadata
            records = [
                *domain.registry.aggregates.values(),
                *domain.registry.entities.values(),
                *domain.registry.projections.values(),
            ]
            for record in records:
                # Event-sourced aggregates live in the event store, not in tables
                if getattr(record.cls.meta_, "is_event_sourced", False):
                    continue
                if record.cls.meta_.provider == provider.name:
                    domain.repository_for(record.cls)._dao  # noqa: B018

            provider._metadata.create_all(engine)

    get_ledger().create_schema()


def drop_db(domain: Domain):
    """Drop the domain's tables and the stock ledger schema."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)

    get_ledger().drop_schema()
