"""Schema management for SQL-backed Protean providers.

The in-memory provider needs no schema. For SQL providers, Protean builds the
table metadata lazily when a DAO is first requested, so every aggregate and
entity bound to the provider is touched before ``create_all`` runs.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for provider in domain.providers.values():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield provider


def _register_tables(domain: Domain, provider) -> None:
    records = [*domain.registry.aggregates.values(), *domain.registry.entities.values()]
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables for every SQL provider of ``domain``. Returns the provider names."""
    prepared = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_tables(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))
            prepared.append(provider.name)
    return prepared


def drop_db(domain: Domain) -> list[str]:
    dropped = []
    with domain.domain_context():
        for provider in _sql_providers(domain):
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
            dropped.append(provider.name)
    return dropped
