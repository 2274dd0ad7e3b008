"""Create catalog tables

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2025-07-18 10:02:41.517306

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "3f2a9c1d7b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "stores",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("merchant_id", sa.String, nullable=False),
        sa.Column("store_id", sa.String, nullable=False),
        sa.Column("store_name", sa.String, nullable=False),
        sa.Column("city", sa.String, nullable=False),
        sa.Column("district", sa.String, nullable=False),
        sa.Column("phone", sa.String, nullable=False),
        sa.Column("currency", sa.String, nullable=False, server_default="MAD"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_stores_merchant_id", "stores", ["merchant_id"], unique=True)
    op.create_index("ix_stores_store_id", "stores", ["store_id"], unique=True)

    # store_id и category_id без внешних ключей: каскад делает сервис
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("store_id", sa.String, nullable=False, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_visible", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )

    op.create_table(
        "products",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("category_id", sa.Integer, nullable=False, index=True),
        sa.Column("store_id", sa.String, nullable=False, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("price", sa.Float, nullable=False, server_default="0"),
        sa.Column("image_url", sa.String, nullable=True),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_visible", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )

    op.create_table(
        "images_library",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("category", sa.String, nullable=False),
        sa.Column("image_url", sa.String, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )

    op.create_table(
        "admin_panel",
        sa.Column("id", sa.Integer, primary_key=True, index=True),
        sa.Column("admin_id", sa.String, nullable=False),
        sa.Column("name", sa.String, nullable=False),
        sa.Column("email", sa.String, nullable=True),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("ix_admin_panel_admin_id", "admin_panel", ["admin_id"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("admin_panel")
    op.drop_table("images_library")
    op.drop_table("products")
    op.drop_table("categories")
    op.drop_index("ix_stores_store_id", "stores")
    op.drop_index("ix_stores_merchant_id", "stores")
    op.drop_table("stores")
