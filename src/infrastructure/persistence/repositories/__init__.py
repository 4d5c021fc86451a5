"""Concrete SQLAlchemy repository implementations.

Exports all SqlRepository classes and the get_repositories() factory function
for wiring at the application boundary.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .purchases import SqlPurchaseRepository


@dataclass
class Repositories:
    """All repository instances bound to a single session factory."""

    purchases: SqlPurchaseRepository


def get_repositories(session_factory: async_sessionmaker[AsyncSession]) -> Repositories:
    """Construct all repositories bound to the given session factory.

        repos = get_repositories(build_session_factory(engine))
        records = await repos.purchases.list_all()
    """
    return Repositories(
        purchases=SqlPurchaseRepository(session_factory),
    )


__all__ = [
    "SqlPurchaseRepository",
    "Repositories",
    "get_repositories",
]
