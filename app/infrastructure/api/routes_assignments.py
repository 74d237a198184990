"""Assignment endpoints — bind and unbind order legs to truckloads."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session, transaction
from app.application.use_cases.manage_assignments import AssignmentStore
from app.domain.entities.assignment import Assignment
from app.domain.errors import TransientStorageError
from app.domain.value_objects.enums import AssignmentType
from app.infrastructure.api.dependencies import get_assignment_store
from app.infrastructure.api.serializers import serialize_assignment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assignments", tags=["assignments"])


class CreateAssignmentRequest(BaseModel):
    order_id: int
    truckload_id: int
    assignment_type: AssignmentType


async def assign_leg(
    session: AsyncSession,
    store: AssignmentStore,
    order_id: int,
    truckload_id: int,
    assignment_type: AssignmentType,
) -> Assignment:
    """Create an assignment in its own transaction.

    Under serializable isolation the loser of a same-leg race is aborted with a
    serialization failure once the winner commits. A fresh read-only
    transaction then reports it as DuplicateLegError; any other transient
    failure is re-raised for the caller to retry.
    """
    try:
        async with transaction(session):
            return await store.create_assignment(order_id, truckload_id, assignment_type)
    except TransientStorageError:
        logger.info(
            "Order %s: %s assignment aborted by a concurrent write, re-checking leg",
            order_id, assignment_type.value,
        )
        async with transaction(session):
            await store.raise_if_leg_taken(order_id, assignment_type)
        raise


@router.post("", status_code=201)
async def create_assignment(
    body: CreateAssignmentRequest,
    store: AssignmentStore = Depends(get_assignment_store),
    session: AsyncSession = Depends(get_session),
):
    assignment = await assign_leg(
        session, store, body.order_id, body.truckload_id, body.assignment_type
    )
    return {"success": True, "assignment": serialize_assignment(assignment)}


@router.delete("/{order_id}/{assignment_type}")
async def remove_assignment(
    order_id: int,
    assignment_type: AssignmentType,
    store: AssignmentStore = Depends(get_assignment_store),
    session: AsyncSession = Depends(get_session),
):
    """Unassign a leg; any split it took part in goes back to pending."""
    async with transaction(session):
        assignment = await store.remove_assignment(order_id, assignment_type)
    return {"success": True, "removed": serialize_assignment(assignment)}


@router.post("/{order_id}/{assignment_type}/complete")
async def complete_stop(
    order_id: int,
    assignment_type: AssignmentType,
    store: AssignmentStore = Depends(get_assignment_store),
    session: AsyncSession = Depends(get_session),
):
    async with transaction(session):
        assignment = await store.set_stop_completed(order_id, assignment_type, True)
    return {"success": True, "assignment": serialize_assignment(assignment)}


@router.post("/{order_id}/{assignment_type}/uncomplete")
async def uncomplete_stop(
    order_id: int,
    assignment_type: AssignmentType,
    store: AssignmentStore = Depends(get_assignment_store),
    session: AsyncSession = Depends(get_session),
):
    async with transaction(session):
        assignment = await store.set_stop_completed(order_id, assignment_type, False)
    return {"success": True, "assignment": serialize_assignment(assignment)}
