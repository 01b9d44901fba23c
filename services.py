"""
services.py
-----------
Business logic for a user's expenses. Validation happens here, storage
is delegated to ExpenseRepository.
"""

import math
from datetime import date, datetime
from typing import Optional

from config import DEFAULT_CATEGORY, MAX_AMOUNT
from database import Expense
from errors import NotFoundError, ValidationError
from logger import get_logger
from repositories import ExpenseRepository
from stats import compute_stats, day_index, format_day

logger = get_logger(__name__)


def normalize_category(category: Optional[str]) -> str:
    """Trimmed category label, or the default sentinel when blank."""
    if category is None:
        return DEFAULT_CATEGORY
    category = category.strip()
    return category or DEFAULT_CATEGORY


class ExpenseService:
    """Create, list, fetch and delete expenses owned by one user at a time."""

    def __init__(self, repo: ExpenseRepository):
        self.repo = repo

    def create(
        self,
        user_id: int,
        description: Optional[str],
        amount: Optional[float],
        category: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Expense:
        description = (description or "").strip()
        if not description or amount is None:
            raise ValidationError("Description and amount are required")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise ValidationError("Amount must be a number")
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Amount must be a positive number")
        if amount > MAX_AMOUNT:
            raise ValidationError(f"Amount must not exceed {MAX_AMOUNT:,.0f}")

        created_at = now or datetime.now()
        day = day_index(created_at)
        expense = Expense(
            user_id=user_id,
            description=description,
            amount=float(amount),
            category=normalize_category(category),
            created_at=created_at,
            day=day,
            date=format_day(day),
        )
        return self.repo.add(expense)

    def list(self, user_id: int) -> list[Expense]:
        return self.repo.list_for_user(user_id)

    def get(self, user_id: int, expense_id: int) -> Expense:
        expense = self.repo.get(user_id, expense_id)
        if expense is None:
            raise NotFoundError("Expense not found")
        return expense

    def delete(self, user_id: int, expense_id: int) -> None:
        # Foreign and missing ids succeed silently so existence is never revealed
        if self.repo.delete(user_id, expense_id):
            logger.info(f"User {user_id} deleted expense #{expense_id}")

    def stats(self, user_id: int, today: Optional[date] = None) -> dict:
        return compute_stats(self.repo.list_for_user(user_id), today=today)
