"""create tenants table

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-09-02 10:12:44.118203

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=26), nullable=False),  # ULID
        sa.Column("owner_user_id", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=False),
        sa.Column("subdomain_label", sa.String(length=63), nullable=True),
        sa.Column("custom_domain", sa.String(length=253), nullable=True),
        sa.Column("custom_domain_status", sa.String(length=16), nullable=True),
        sa.Column(
            "custom_domain_verification_token", sa.String(length=64), nullable=True
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    # Hostname bindings and owners are globally unique; NULLs never collide
    op.create_index(
        "ix_tenants_subdomain_label", "tenants", ["subdomain_label"], unique=True
    )
    op.create_index(
        "ix_tenants_custom_domain", "tenants", ["custom_domain"], unique=True
    )
    op.create_index(
        "ix_tenants_owner_user_id", "tenants", ["owner_user_id"], unique=True
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_tenants_owner_user_id", table_name="tenants")
    op.drop_index("ix_tenants_custom_domain", table_name="tenants")
    op.drop_index("ix_tenants_subdomain_label", table_name="tenants")
    op.drop_table("tenants")
