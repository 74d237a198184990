"""Initial schema: orders, truckloads, assignments, split allocations, ledger.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(10, 2)


def upgrade() -> None:
    # Customers (owned by order intake)
    op.create_table(
        "customers",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("customer_name", sa.String(200), nullable=False),
    )

    # Truckloads
    op.create_table(
        "truckloads",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("driver_name", sa.String(200), nullable=True),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("is_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    # Orders
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("freight_quote", MONEY, nullable=False, server_default="0"),
        sa.Column(
            "pickup_customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=True
        ),
        sa.Column(
            "delivery_customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=True
        ),
        sa.Column("status", sa.String(30), nullable=False, server_default="unassigned"),
        sa.Column(
            "is_transfer_order", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_orders_status", "orders", ["status"])

    # Truckload ↔ order leg assignments
    op.create_table(
        "truckload_order_assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "order_id",
            sa.Integer,
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "truckload_id",
            sa.Integer,
            sa.ForeignKey("truckloads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("assignment_type", sa.String(10), nullable=False),
        sa.Column("sequence_number", sa.Integer, nullable=False),
        sa.Column("assignment_quote", MONEY, nullable=True),
        sa.Column("is_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column(
            "exclude_from_load_value", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("order_id", "assignment_type", name="uq_assignments_order_leg"),
        sa.CheckConstraint(
            "assignment_type IN ('pickup', 'delivery')", name="ck_assignments_type"
        ),
        sa.CheckConstraint("sequence_number >= 1", name="ck_assignments_sequence"),
    )
    op.create_index(
        "idx_assignments_truckload",
        "truckload_order_assignments",
        ["truckload_id", "sequence_number"],
    )

    # Split allocations (one per order)
    op.create_table(
        "split_allocations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "order_id",
            sa.Integer,
            sa.ForeignKey("orders.id", ondelete="CASCADE"),
            unique=True,
            nullable=False,
        ),
        sa.Column("misc_amount", MONEY, nullable=False),
        sa.Column("full_quote_leg", sa.String(10), nullable=False),
        sa.Column(
            "full_quote_applies_to", sa.String(20), nullable=False, server_default="driver_pay"
        ),
        sa.Column("misc_applies_to", sa.String(20), nullable=False, server_default="driver_pay"),
        sa.Column("state", sa.String(10), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("misc_amount > 0", name="ck_split_allocations_misc_positive"),
        sa.CheckConstraint("state IN ('pending', 'applied')", name="ck_split_allocations_state"),
    )

    # Pay adjustment ledger
    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "truckload_id",
            sa.Integer,
            sa.ForeignKey("truckloads.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "order_id",
            sa.Integer,
            sa.ForeignKey("orders.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "split_allocation_id",
            sa.Integer,
            sa.ForeignKey("split_allocations.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("is_addition", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("applies_to", sa.String(20), nullable=False, server_default="driver_pay"),
        sa.Column("origin", sa.String(20), nullable=False),
        sa.Column("comment", sa.Text, nullable=False, server_default=""),
        sa.Column("driver_name", sa.String(200), nullable=True),
        sa.Column("action", sa.String(50), nullable=True),
        sa.Column("entry_date", sa.Date, nullable=True),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("amount > 0", name="ck_ledger_entries_amount_positive"),
        sa.CheckConstraint(
            "(origin = 'split_allocation') = (split_allocation_id IS NOT NULL)",
            name="ck_ledger_entries_origin_link",
        ),
    )
    op.create_index("idx_ledger_entries_truckload", "ledger_entries", ["truckload_id"])
    op.create_index(
        "idx_ledger_entries_split_allocation", "ledger_entries", ["split_allocation_id"]
    )


def downgrade() -> None:
    op.drop_table("ledger_entries")
    op.drop_table("split_allocations")
    op.drop_table("truckload_order_assignments")
    op.drop_table("orders")
    op.drop_table("truckloads")
    op.drop_table("customers")
