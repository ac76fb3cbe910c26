"""Database infrastructure - engines, sessions and the ORM base."""

from infrastructure.database.models import Base, TenantOwnedMixin, TimestampMixin

__all__ = [
    "Base",
    "TenantOwnedMixin",
    "TimestampMixin",
]
