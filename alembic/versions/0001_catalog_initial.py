from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0001_catalog_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "category",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=200), nullable=True),
        sa.Column(
            "parent_id",
            sa.Integer(),
            sa.ForeignKey("category.id", name="fk_category_parent_id_category"),
            nullable=True,
        ),
        sa.Column("is_active", sa.Boolean(), server_default="1", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_category_name", "category", ["name"])
    op.create_index("ix_category_parent_id", "category", ["parent_id"])

    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("category.id", name="fk_product_category_id_category"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("base_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("discount_percentage", sa.Numeric(5, 2), server_default="0", nullable=False),
        sa.Column("images", sa.JSON(), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), server_default="1", nullable=False),
        sa.Column("featured", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("base_price >= 0", name="ck_product_base_price_non_negative"),
        sa.CheckConstraint(
            "discount_percentage >= 0 AND discount_percentage <= 100",
            name="ck_product_discount_percentage_range",
        ),
    )
    op.create_index("ix_product_category_id", "product", ["category_id"])
    op.create_index("ix_product_active_category", "product", ["is_active", "category_id"])

    op.create_table(
        "product_variant",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "product_id",
            sa.Integer(),
            sa.ForeignKey(
                "product.id", name="fk_product_variant_product_id_product", ondelete="CASCADE"
            ),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("value", sa.String(length=100), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sku", sa.String(length=64), nullable=False),
        sa.CheckConstraint("price >= 0", name="ck_product_variant_price_non_negative"),
        sa.CheckConstraint("stock >= 0", name="ck_product_variant_stock_non_negative"),
    )
    op.create_index("ix_product_variant_product_id", "product_variant", ["product_id"])
    op.create_index("ix_product_variant_sku", "product_variant", ["sku"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_product_variant_sku", table_name="product_variant")
    op.drop_index("ix_product_variant_product_id", table_name="product_variant")
    op.drop_table("product_variant")
    op.drop_index("ix_product_active_category", table_name="product")
    op.drop_index("ix_product_category_id", table_name="product")
    op.drop_table("product")
    op.drop_index("ix_category_parent_id", table_name="category")
    op.drop_index("ix_category_name", table_name="category")
    op.drop_table("category")
