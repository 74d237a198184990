"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.adapters.persistence.database import Base

MONEY = Numeric(10, 2)


class CustomerModel(Base):
    """Read-only here; owned by order intake."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)


class TruckloadModel(Base):
    __tablename__ = "truckloads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    assignments: Mapped[list["AssignmentModel"]] = relationship(back_populates="truckload")


class OrderModel(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    freight_quote: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=0)
    pickup_customer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("customers.id"), nullable=True
    )
    delivery_customer_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("customers.id"), nullable=True
    )
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="unassigned")
    is_transfer_order: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    pickup_customer: Mapped["CustomerModel | None"] = relationship(
        foreign_keys=[pickup_customer_id], lazy="joined"
    )
    delivery_customer: Mapped["CustomerModel | None"] = relationship(
        foreign_keys=[delivery_customer_id], lazy="joined"
    )
    assignments: Mapped[list["AssignmentModel"]] = relationship(back_populates="order")

    __table_args__ = (Index("idx_orders_status", "status"),)


class AssignmentModel(Base):
    __tablename__ = "truckload_order_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    truckload_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("truckloads.id", ondelete="CASCADE"), nullable=False
    )
    assignment_type: Mapped[str] = mapped_column(String(10), nullable=False)
    sequence_number: Mapped[int] = mapped_column(Integer, nullable=False)
    assignment_quote: Mapped[Decimal | None] = mapped_column(MONEY, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    exclude_from_load_value: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    order: Mapped["OrderModel"] = relationship(back_populates="assignments")
    truckload: Mapped["TruckloadModel"] = relationship(back_populates="assignments")

    __table_args__ = (
        UniqueConstraint("order_id", "assignment_type", name="uq_assignments_order_leg"),
        CheckConstraint(
            "assignment_type IN ('pickup', 'delivery')", name="ck_assignments_type"
        ),
        CheckConstraint("sequence_number >= 1", name="ck_assignments_sequence"),
        Index("idx_assignments_truckload", "truckload_id", "sequence_number"),
    )


class SplitAllocationModel(Base):
    __tablename__ = "split_allocations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    misc_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    full_quote_leg: Mapped[str] = mapped_column(String(10), nullable=False)
    full_quote_applies_to: Mapped[str] = mapped_column(
        String(20), nullable=False, default="driver_pay"
    )
    misc_applies_to: Mapped[str] = mapped_column(
        String(20), nullable=False, default="driver_pay"
    )
    state: Mapped[str] = mapped_column(String(10), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("misc_amount > 0", name="ck_split_allocations_misc_positive"),
        CheckConstraint("state IN ('pending', 'applied')", name="ck_split_allocations_state"),
    )


class LedgerEntryModel(Base):
    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    truckload_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("truckloads.id", ondelete="CASCADE"), nullable=False
    )
    order_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("orders.id", ondelete="SET NULL"), nullable=True
    )
    split_allocation_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("split_allocations.id", ondelete="CASCADE"), nullable=True
    )
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    is_addition: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    applies_to: Mapped[str] = mapped_column(String(20), nullable=False, default="driver_pay")
    origin: Mapped[str] = mapped_column(String(20), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False, default="")
    driver_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    action: Mapped[str | None] = mapped_column(String(50), nullable=True)
    entry_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_entries_amount_positive"),
        CheckConstraint(
            "(origin = 'split_allocation') = (split_allocation_id IS NOT NULL)",
            name="ck_ledger_entries_origin_link",
        ),
        Index("idx_ledger_entries_truckload", "truckload_id"),
        Index("idx_ledger_entries_split_allocation", "split_allocation_id"),
    )
