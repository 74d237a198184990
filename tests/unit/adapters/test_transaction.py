"""Tests for the transaction boundary and transient error mapping."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from app.adapters.persistence.database import is_transient, transaction
from app.domain.errors import InvalidAmountError, TransientStorageError


class FakeSession:
    def __init__(self):
        self.committed = False
        self.rolled_back = False

    async def commit(self):
        self.committed = True

    async def rollback(self):
        self.rolled_back = True


class PgError(Exception):
    def __init__(self, sqlstate):
        super().__init__(f"sqlstate {sqlstate}")
        self.sqlstate = sqlstate


def _dbapi_error(sqlstate: str) -> DBAPIError:
    return DBAPIError("INSERT ...", {}, PgError(sqlstate))


def test_serialization_failure_is_transient():
    assert is_transient(_dbapi_error("40001"))


def test_deadlock_is_transient():
    assert is_transient(_dbapi_error("40P01"))


def test_operational_error_is_transient():
    assert is_transient(OperationalError("SELECT 1", {}, Exception("connection reset")))


def test_unique_violation_is_not_transient():
    assert not is_transient(IntegrityError("INSERT ...", {}, PgError("23505")))


@pytest.mark.asyncio
async def test_commits_on_success():
    session = FakeSession()
    async with transaction(session):
        pass
    assert session.committed and not session.rolled_back


@pytest.mark.asyncio
async def test_domain_error_rolls_back():
    session = FakeSession()
    with pytest.raises(InvalidAmountError):
        async with transaction(session):
            raise InvalidAmountError("nope")
    assert session.rolled_back and not session.committed


@pytest.mark.asyncio
async def test_serialization_failure_becomes_transient():
    session = FakeSession()
    with pytest.raises(TransientStorageError):
        async with transaction(session):
            raise _dbapi_error("40001")
    assert session.rolled_back


@pytest.mark.asyncio
async def test_other_db_errors_propagate():
    session = FakeSession()
    with pytest.raises(IntegrityError):
        async with transaction(session):
            raise IntegrityError("INSERT ...", {}, PgError("23505"))
    assert session.rolled_back
