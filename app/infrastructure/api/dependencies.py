"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.adapters.persistence.repositories import (
    SqlAssignmentRepository,
    SqlLedgerRepository,
    SqlOrderRepository,
    SqlSplitAllocationRepository,
    SqlTruckloadRepository,
)
from app.application.use_cases.ledger import LedgerService
from app.application.use_cases.manage_assignments import AssignmentStore
from app.application.use_cases.project_order import OrderProjector
from app.application.use_cases.split_allocation import SplitAllocationManager

# Re-export session dependency
get_db_session = get_session


def build_split_manager(session: AsyncSession) -> SplitAllocationManager:
    return SplitAllocationManager(
        order_repo=SqlOrderRepository(session),
        truckload_repo=SqlTruckloadRepository(session),
        assignment_repo=SqlAssignmentRepository(session),
        split_repo=SqlSplitAllocationRepository(session),
        ledger_repo=SqlLedgerRepository(session),
    )


def build_assignment_store(session: AsyncSession) -> AssignmentStore:
    order_repo = SqlOrderRepository(session)
    assignment_repo = SqlAssignmentRepository(session)
    return AssignmentStore(
        order_repo=order_repo,
        truckload_repo=SqlTruckloadRepository(session),
        assignment_repo=assignment_repo,
        ledger_repo=SqlLedgerRepository(session),
        projector=OrderProjector(order_repo, assignment_repo),
        split_manager=build_split_manager(session),
    )


def build_ledger_service(session: AsyncSession) -> LedgerService:
    return LedgerService(
        ledger_repo=SqlLedgerRepository(session),
        truckload_repo=SqlTruckloadRepository(session),
        order_repo=SqlOrderRepository(session),
    )


def get_assignment_store(session: AsyncSession = Depends(get_session)) -> AssignmentStore:
    return build_assignment_store(session)


def get_split_manager(session: AsyncSession = Depends(get_session)) -> SplitAllocationManager:
    return build_split_manager(session)


def get_ledger_service(session: AsyncSession = Depends(get_session)) -> LedgerService:
    return build_ledger_service(session)
