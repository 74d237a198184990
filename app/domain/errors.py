"""Domain error taxonomy.

Every error carries a stable ``kind`` string that the API layer surfaces to
clients next to the human-readable message.
"""

from __future__ import annotations


class DomainError(Exception):
    kind = "domain_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ─── Not found ───────────────────────────────────────────────────────


class NotFoundError(DomainError):
    kind = "not_found"
    entity = "Entity"

    def __init__(self, entity_id: int | str, message: str | None = None):
        self.entity_id = entity_id
        super().__init__(message or f"{self.entity} {entity_id} not found")


class OrderNotFoundError(NotFoundError):
    kind = "order_not_found"
    entity = "Order"


class TruckloadNotFoundError(NotFoundError):
    kind = "truckload_not_found"
    entity = "Truckload"


class AssignmentNotFoundError(NotFoundError):
    kind = "assignment_not_found"
    entity = "Assignment"


class SplitAllocationNotFoundError(NotFoundError):
    kind = "split_allocation_not_found"
    entity = "Split allocation for order"


class LedgerEntryNotFoundError(NotFoundError):
    kind = "ledger_entry_not_found"
    entity = "Ledger entry"


# ─── Conflicts / business rules ──────────────────────────────────────


class DuplicateLegError(DomainError):
    kind = "duplicate_leg"

    def __init__(self, order_id: int, assignment_type: str):
        self.order_id = order_id
        self.assignment_type = assignment_type
        super().__init__(f"Order {order_id} already has a {assignment_type} assignment")


class InvalidAmountError(DomainError):
    kind = "invalid_amount"


class TransferOrderCannotSplitError(DomainError):
    kind = "transfer_order_cannot_split"

    def __init__(self, order_id: int):
        self.order_id = order_id
        super().__init__(
            f"Order {order_id} is a transfer order (pickup and delivery on the same "
            "truckload) and cannot split pay across drivers"
        )


class SplitNotEligibleError(DomainError):
    kind = "split_not_eligible"


class ManagedLedgerEntryError(DomainError):
    kind = "managed_ledger_entry"

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(
            f"Ledger entry {entry_id} belongs to a split allocation; "
            "change or clear the split instead"
        )


# ─── Infrastructure ──────────────────────────────────────────────────


class TransientStorageError(DomainError):
    """Connection or transaction failure; safe for the caller to retry."""

    kind = "transient_storage_error"
