from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from database import Expense, User
from errors import InfrastructureError
from repositories import ExpenseRepository, UserRepository


def database_down(*args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


@pytest.fixture
def user(db):
    return UserRepository(db).add(User(username="alice", password_hash="x", name="Alice"))


def new_expense(user_id):
    now = datetime(2026, 10, 19, 9, 0)
    return Expense(
        user_id=user_id,
        description="Lunch",
        amount=10.0,
        category="food",
        created_at=now,
        day=now.date().toordinal(),
        date="19/10/2026",
    )


def test_failed_commit_rolls_back_and_raises(db, user, monkeypatch):
    repo = ExpenseRepository(db)
    monkeypatch.setattr(db, "commit", database_down)

    with pytest.raises(InfrastructureError):
        repo.add(new_expense(user.id))

    monkeypatch.undo()
    assert db.query(Expense).count() == 0


def test_failed_query_raises_infrastructure_error(db, user, monkeypatch):
    monkeypatch.setattr(db, "query", database_down)

    with pytest.raises(InfrastructureError):
        ExpenseRepository(db).list_for_user(user.id)
    with pytest.raises(InfrastructureError):
        UserRepository(db).get_by_username("alice")


def test_failed_user_insert_leaves_no_row(db, monkeypatch):
    repo = UserRepository(db)
    monkeypatch.setattr(db, "commit", database_down)

    with pytest.raises(InfrastructureError):
        repo.add(User(username="bob", password_hash="x", name="Bob"))

    monkeypatch.undo()
    assert db.query(User).count() == 0
