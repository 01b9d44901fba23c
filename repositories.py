"""
repositories.py
---------------
Data access layer. All queries against the `users` and `expenses`
tables live here; database failures leave as InfrastructureError.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database import Expense, User
from errors import ConflictError, InfrastructureError
from logger import get_logger

logger = get_logger(__name__)


class UserRepository:
    """Repository for the users table."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_username(self, username: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.username == username).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up user {username!r}: {e}")
            raise InfrastructureError("Database unavailable") from e

    def get_by_id(self, user_id: int) -> Optional[User]:
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load user #{user_id}: {e}")
            raise InfrastructureError("Database unavailable") from e

    def add(self, user: User) -> User:
        """
        Insert a new user.

        Raises:
            ConflictError: The username is already taken. Nothing is written.
            InfrastructureError: Any other database failure.
        """
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Duplicate username rejected: {user.username!r}")
            raise ConflictError("Username already exists") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to add user {user.username!r}: {e}")
            raise InfrastructureError("Database unavailable") from e


class ExpenseRepository:
    """Repository for the expenses table. Every query is scoped to a user."""

    def __init__(self, db: Session):
        self.db = db

    # ── CREATE ────────────────────────────────────────────

    def add(self, expense: Expense) -> Expense:
        try:
            self.db.add(expense)
            self.db.commit()
            self.db.refresh(expense)
            logger.info(f"Added expense #{expense.id} for user {expense.user_id}")
            return expense
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to add expense: {e}")
            raise InfrastructureError("Database unavailable") from e

    # ── READ ──────────────────────────────────────────────

    def list_for_user(self, user_id: int) -> list[Expense]:
        """All of a user's expenses, newest first."""
        try:
            return (
                self.db.query(Expense)
                .filter(Expense.user_id == user_id)
                .order_by(Expense.created_at.desc(), Expense.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list expenses for user {user_id}: {e}")
            raise InfrastructureError("Database unavailable") from e

    def get(self, user_id: int, expense_id: int) -> Optional[Expense]:
        try:
            return (
                self.db.query(Expense)
                .filter(Expense.id == expense_id, Expense.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to load expense #{expense_id}: {e}")
            raise InfrastructureError("Database unavailable") from e

    # ── DELETE ────────────────────────────────────────────

    def delete(self, user_id: int, expense_id: int) -> bool:
        """
        Delete an expense owned by `user_id`.

        Returns:
            True if a row was removed, False if no such expense belongs to the user.
        """
        try:
            removed = (
                self.db.query(Expense)
                .filter(Expense.id == expense_id, Expense.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self.db.commit()
            return removed > 0
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete expense #{expense_id}: {e}")
            raise InfrastructureError("Database unavailable") from e
