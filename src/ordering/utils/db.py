"""Schema management for the SQL providers (SQLite locally, PostgreSQL in production).

The memory provider used by the test suite needs no schema, so every helper
here skips non-SQL providers.
"""

import structlog
from protean.domain import Domain
from sqlalchemy import create_engine

logger = structlog.get_logger(__name__)

SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in SQL_PROVIDERS:
            yield name, provider


def _register_tables(domain: Domain, provider) -> None:
    # Touching a repository's DAO builds the SQLAlchemy model into the provider metadata.
    records = list(domain.registry.aggregates.values()) + list(domain.registry.entities.values())
    for record in records:
        if record.cls.meta_.provider == provider.name:
            domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create any missing tables; returns the names of the providers touched."""
    touched = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _register_tables(domain, provider)
            provider._metadata.create_all(engine, checkfirst=True)
            logger.info("Schema ready", provider=name, tables=sorted(provider._metadata.tables))
            touched.append(name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    """Drop every table of the SQL providers."""
    dropped = []
    with domain.domain_context():
        for name, provider in _sql_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _register_tables(domain, provider)
            provider._metadata.drop_all(engine)
            logger.info("Schema dropped", provider=name)
            dropped.append(name)
    return dropped
