"""initial schema: suppliers, products, orders, order lines, stock movements

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIGINT_PK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")

ORDER_STATUS = sa.Enum("pending", "validated", "delivered", name="order_status")
MOVEMENT_TYPE = sa.Enum("inbound", "outbound", name="movement_type")


def upgrade() -> None:
    op.create_table(
        "suppliers",
        sa.Column("id", BIGINT_PK, primary_key=True),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("address", sa.String(255)),
        sa.Column("contact", sa.String(255)),
        sa.Column("email", sa.String(255)),
        sa.Column("phone", sa.String(32)),
        sa.Column("city", sa.String(128)),
        sa.Column("tax_code", sa.String(32)),
    )

    op.create_table(
        "products",
        sa.Column("id", BIGINT_PK, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("description", sa.Text()),
        sa.Column("category", sa.String(128)),
        sa.Column("unit_price", sa.Numeric(14, 2), nullable=False),
        sa.Column("quantity_on_hand", sa.Integer(), nullable=False),
        sa.Column("cost_per_unit", sa.Numeric(14, 4), nullable=False),
        sa.CheckConstraint("quantity_on_hand >= 0", name="ck_product_qty_on_hand_nonneg"),
        sa.CheckConstraint("unit_price >= 0", name="ck_product_unit_price_nonneg"),
    )

    op.create_table(
        "orders",
        sa.Column("id", BIGINT_PK, primary_key=True),
        sa.Column(
            "supplier_id",
            sa.BigInteger(),
            sa.ForeignKey("suppliers.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("date_created", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", ORDER_STATUS, nullable=False),
        sa.Column("total_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("stock_applied", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_orders_supplier_id", "orders", ["supplier_id"])

    op.create_table(
        "order_lines",
        sa.Column(
            "order_id",
            sa.BigInteger(),
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "product_id",
            sa.BigInteger(),
            sa.ForeignKey("products.id", ondelete="RESTRICT"),
            primary_key=True,
        ),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.CheckConstraint("quantity > 0", name="ck_order_line_qty_pos"),
    )

    op.create_table(
        "stock_movements",
        sa.Column("id", BIGINT_PK, primary_key=True),
        sa.Column(
            "order_id",
            sa.BigInteger(),
            sa.ForeignKey("orders.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("movement_type", MOVEMENT_TYPE, nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("movement_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("quantity >= 0", name="ck_stock_movement_qty_nonneg"),
    )
    op.create_index("ix_stock_movements_order_id", "stock_movements", ["order_id"])
    op.create_index("ix_stock_movements_order_date", "stock_movements", ["order_id", "movement_date"])


def downgrade() -> None:
    op.drop_index("ix_stock_movements_order_date", table_name="stock_movements")
    op.drop_index("ix_stock_movements_order_id", table_name="stock_movements")
    op.drop_table("stock_movements")
    op.drop_table("order_lines")
    op.drop_index("ix_orders_supplier_id", table_name="orders")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("suppliers")
    ORDER_STATUS.drop(op.get_bind(), checkfirst=True)
    MOVEMENT_TYPE.drop(op.get_bind(), checkfirst=True)
