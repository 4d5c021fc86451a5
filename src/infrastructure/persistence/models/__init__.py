"""ORM model registry: imports all layer modules so every mapper class is
registered with Base.metadata before Alembic or SQLAlchemy runs.
"""

from src.infrastructure.persistence.models.purchases import CryptoPurchase

__all__ = [
    "CryptoPurchase",
]
