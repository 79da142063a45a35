"""Boundary checks for expenses entering the ledger.

The simplifier never calls these; it settles whatever it is given.
"""

from .exceptions import InvalidExpenseError
from .models import Expense
from .simplifier import EPSILON


def validate_expense(expense: Expense) -> Expense:
    """
    Check that an expense's payers and split details both add up to its total.

    Args:
        expense: The expense to check

    Returns:
        The same expense, for chaining

    Raises:
        InvalidExpenseError: If either breakdown is off by more than half a cent
    """
    total_paid = expense.total_paid()
    if abs(total_paid - expense.total_amount) > EPSILON:
        raise InvalidExpenseError(
            expense.id,
            f"sum paid by payers ({total_paid:.2f}) does not match "
            f"total amount ({expense.total_amount:.2f})",
        )

    if not expense.split_details:
        raise InvalidExpenseError(expense.id, "no split details")

    total_owed = expense.total_owed()
    if abs(total_owed - expense.total_amount) > EPSILON:
        raise InvalidExpenseError(
            expense.id,
            f"sum of split amounts ({total_owed:.2f}) does not match "
            f"total amount ({expense.total_amount:.2f})",
        )

    return expense
