"""Same-leg assignment race against a real PostgreSQL database.

Runs only when TEST_DATABASE_URL points at a disposable database
(postgresql+asyncpg://...); the schema there is dropped and recreated.
"""

from __future__ import annotations

import asyncio
import os
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.adapters.persistence.database import Base, transaction
from app.adapters.persistence.models import AssignmentModel, OrderModel, TruckloadModel
from app.config import settings
from app.domain.errors import DuplicateLegError
from app.domain.value_objects.enums import AssignmentType
from app.infrastructure.api.dependencies import build_assignment_store
from app.infrastructure.api.routes_assignments import assign_leg

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")

pytestmark = [
    pytest.mark.postgres,
    pytest.mark.skipif(not TEST_DATABASE_URL, reason="TEST_DATABASE_URL not set"),
]


@pytest.mark.asyncio
async def test_same_leg_race_has_one_winner():
    engine = create_async_engine(
        TEST_DATABASE_URL, isolation_level=settings.db_isolation_level
    )
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

        async with session_factory() as session, transaction(session):
            session.add_all([
                OrderModel(id=1, freight_quote=Decimal("500.00")),
                TruckloadModel(id=1, driver_name="Alice"),
                TruckloadModel(id=2, driver_name="Bob"),
            ])

        async def assign(truckload_id: int):
            async with session_factory() as session:
                return await assign_leg(
                    session, build_assignment_store(session),
                    1, truckload_id, AssignmentType.PICKUP,
                )

        results = await asyncio.gather(assign(1), assign(2), return_exceptions=True)

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1, results
        assert isinstance(failures[0], DuplicateLegError)

        async with session_factory() as session:
            count = await session.scalar(
                select(func.count()).select_from(AssignmentModel).where(
                    AssignmentModel.order_id == 1
                )
            )
        assert count == 1
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()
