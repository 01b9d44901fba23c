from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from database import get_db, User
from repositories import ExpenseRepository
from schemas import ExpenseCreate, ExpenseOut, Stats, Success
from services import ExpenseService
from stats import compute_stats
from auth import get_current_user
import csv
from io import StringIO


router = APIRouter()


def get_expense_service(db: Session = Depends(get_db)) -> ExpenseService:
    return ExpenseService(ExpenseRepository(db))


@router.get("/expenses", response_model=list[ExpenseOut])
def get_expenses(
    service: ExpenseService = Depends(get_expense_service),
    current_user: User = Depends(get_current_user),
):
    return service.list(current_user.id)


@router.post("/expenses", response_model=ExpenseOut)
def create_expense(
    expense: ExpenseCreate,
    service: ExpenseService = Depends(get_expense_service),
    current_user: User = Depends(get_current_user),
):
    return service.create(
        current_user.id, expense.description, expense.amount, expense.category
    )


@router.get("/expenses/{expense_id}", response_model=ExpenseOut)
def get_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expense_service),
    current_user: User = Depends(get_current_user),
):
    return service.get(current_user.id, expense_id)


@router.delete("/expenses/{expense_id}", response_model=Success)
def delete_expense(
    expense_id: int,
    service: ExpenseService = Depends(get_expense_service),
    current_user: User = Depends(get_current_user),
):
    service.delete(current_user.id, expense_id)
    return Success()


@router.get("/stats", response_model=Stats)
def get_stats(
    service: ExpenseService = Depends(get_expense_service),
    current_user: User = Depends(get_current_user),
):
    return service.stats(current_user.id)


@router.get("/export")
def export_expenses(
    service: ExpenseService = Depends(get_expense_service),
    current_user: User = Depends(get_current_user),
):
    """
    Exports the user's expenses as CSV containing:
    - All expenses, newest first
    - Category-wise totals
    - The grand total
    """
    expenses = service.list(current_user.id)
    stats = compute_stats(expenses)

    csv_data = StringIO()
    writer = csv.writer(csv_data)

    writer.writerow(["Date", "Description", "Category", "Amount"])
    for e in expenses:
        writer.writerow([e.date, e.description, e.category, e.amount])

    # Summary section
    writer.writerow([])
    writer.writerow(["Category", "Total"])
    for category, total in stats["byCategory"].items():
        writer.writerow([category, total])
    writer.writerow(["Total", stats["total"]])

    csv_data.seek(0)
    return StreamingResponse(
        iter([csv_data.getvalue()]),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={current_user.username}_expenses.csv"
        },
    )
