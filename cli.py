"""
cli.py
------
Command-line access to a user's expenses, over the same database as the API.

    expense-tracker --username alice add "Lunch" 12.5 --category food
    expense-tracker --username alice list
    expense-tracker --username alice total
    expense-tracker --username alice delete 2

`delete` takes the 1-based position shown by `list`. The password is read
from --password or prompted for.
"""

import argparse
import getpass
import sys
from typing import List, Optional

from auth import AuthService
from database import SessionLocal, init_db
from errors import ExpenseTrackerError
from repositories import ExpenseRepository, UserRepository
from services import ExpenseService
from sessions import SessionStore
from stats import compute_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Personal Expense Tracker (CLI)")
    parser.add_argument("--username", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    commands = parser.add_subparsers(dest="command", required=True)

    add = commands.add_parser("add", help="Record a new expense")
    add.add_argument("description")
    add.add_argument("amount", type=float)
    add.add_argument("--category")

    commands.add_parser("list", help="Show all expenses, newest first")
    commands.add_parser("total", help="Show total spending")

    delete = commands.add_parser("delete", help="Delete an expense by list position")
    delete.add_argument("index", type=int)
    return parser


def print_expenses(expenses) -> None:
    if not expenses:
        print("No expenses yet.")
        return
    for position, expense in enumerate(expenses, start=1):
        print(f"{position}. {expense.description}")
        print(f"   Amount: {expense.amount:,.2f}")
        print(f"   Category: {expense.category}")
        print(f"   Date: {expense.date}")


def run(args, db) -> int:
    auth = AuthService(UserRepository(db), SessionStore())
    password = args.password or getpass.getpass("Password: ")
    user, _ = auth.login(args.username, password)
    service = ExpenseService(ExpenseRepository(db))

    if args.command == "add":
        expense = service.create(user.id, args.description, args.amount, args.category)
        print(f"Added #{expense.id}: {expense.description} ({expense.amount:,.2f})")
    elif args.command == "list":
        print_expenses(service.list(user.id))
    elif args.command == "total":
        stats = compute_stats(service.list(user.id))
        print(f"Total: {stats['total']:,.2f} across {stats['count']} expense(s)")
    elif args.command == "delete":
        expenses = service.list(user.id)
        if not 1 <= args.index <= len(expenses):
            print(f"Invalid position: {args.index}", file=sys.stderr)
            return 1
        expense = expenses[args.index - 1]
        service.delete(user.id, expense.id)
        print(f"Deleted: {expense.description}")
    return 0


def main(argv: Optional[List[str]] = None, session_factory=SessionLocal) -> int:
    args = build_parser().parse_args(argv)
    if session_factory is SessionLocal:
        init_db()

    db = session_factory()
    try:
        return run(args, db)
    except ExpenseTrackerError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
