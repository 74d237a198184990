"""Domain object → API response dict converters."""

from __future__ import annotations

from decimal import Decimal

from app.domain.entities.assignment import Assignment
from app.domain.entities.ledger_entry import LedgerEntry
from app.domain.entities.order import Order
from app.domain.entities.split_allocation import SplitAllocation


def money(value: Decimal | None) -> str | None:
    return f"{value:.2f}" if value is not None else None


def serialize_assignment(a: Assignment) -> dict:
    return {
        "id": a.id,
        "order_id": a.order_id,
        "truckload_id": a.truckload_id,
        "assignment_type": a.assignment_type.value,
        "sequence_number": a.sequence_number,
        "assignment_quote": money(a.assignment_quote),
        "is_completed": a.is_completed,
        "exclude_from_load_value": a.exclude_from_load_value,
    }


def serialize_order(o: Order) -> dict:
    return {
        "id": o.id,
        "freight_quote": money(o.freight_quote),
        "status": o.status.value,
        "is_transfer_order": o.is_transfer_order,
        "pickup_customer_name": o.pickup_customer_name,
        "delivery_customer_name": o.delivery_customer_name,
    }


def serialize_split(s: SplitAllocation | None) -> dict | None:
    if s is None:
        return None
    return {
        "id": s.id,
        "order_id": s.order_id,
        "misc_amount": money(s.misc_amount),
        "full_quote_leg": s.full_quote_leg.value,
        "misc_leg": s.misc_leg.value,
        "full_quote_applies_to": s.full_quote_applies_to.value,
        "misc_applies_to": s.misc_applies_to.value,
        "state": s.state.value,
    }


def serialize_ledger_entry(e: LedgerEntry) -> dict:
    return {
        "id": e.id,
        "truckload_id": e.truckload_id,
        "order_id": e.order_id,
        "amount": money(e.amount),
        "is_addition": e.is_addition,
        "signed_amount": money(e.signed_amount),
        "applies_to": e.applies_to.value,
        "origin": e.origin.value,
        "split_allocation_id": e.split_allocation_id,
        "comment": e.comment,
        "driver_name": e.driver_name,
        "action": e.action,
        "entry_date": str(e.entry_date) if e.entry_date else None,
        "created_at": e.created_at.isoformat() if e.created_at else None,
    }
