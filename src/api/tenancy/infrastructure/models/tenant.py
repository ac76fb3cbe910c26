"""SQLAlchemy ORM model for the tenants table.

One row per merchant store. The three unique indexes are what make label,
custom domain and owner bindings safe under concurrent provisioning.
"""

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

SUBDOMAIN_LABEL_INDEX = "ix_tenants_subdomain_label"
CUSTOM_DOMAIN_INDEX = "ix_tenants_custom_domain"
OWNER_INDEX = "ix_tenants_owner_user_id"


class TenantModel(Base, TimestampMixin):
    """ORM model for tenants table.

    NULL labels and domains do not collide with each other; only bound
    values are unique.
    """

    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    owner_user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    subdomain_label: Mapped[str | None] = mapped_column(String(63), nullable=True)
    custom_domain: Mapped[str | None] = mapped_column(String(253), nullable=True)
    custom_domain_status: Mapped[str | None] = mapped_column(
        String(16), nullable=True
    )
    custom_domain_verification_token: Mapped[str | None] = mapped_column(
        String(64), nullable=True
    )

    __table_args__ = (
        Index(SUBDOMAIN_LABEL_INDEX, "subdomain_label", unique=True),
        Index(CUSTOM_DOMAIN_INDEX, "custom_domain", unique=True),
        Index(OWNER_INDEX, "owner_user_id", unique=True),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<TenantModel(id={self.id}, subdomain_label={self.subdomain_label}, "
            f"custom_domain={self.custom_domain})>"
        )
