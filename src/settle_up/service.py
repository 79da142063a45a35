"""Service layer that composes ledger snapshots with the balance logic.

Every operation takes a full ledger snapshot and returns fresh values; ledgers
passed in are never mutated.
"""

import logging
from datetime import datetime

from .config import Settings
from .exceptions import DebtNotFoundError, SettlementAmountError
from .models import (
    Debt,
    Expense,
    ExpensePayer,
    ExpenseSplitDetail,
    GroupSummary,
    Ledger,
    Member,
    NetBalance,
    SplitType,
)
from .simplifier import compute_net_balances, round_amount, simplify_debts
from .summary import summarize_group
from .validation import validate_expense

logger = logging.getLogger(__name__)


def active_expenses(expenses: list[Expense]) -> list[Expense]:
    """Drop settlement records; only real expenses feed the simplifier."""
    return [expense for expense in expenses if not expense.is_settlement]


def involved_members(ledger: Ledger) -> list[Member]:
    """
    Group members plus anyone referenced by an expense, in first-seen order.

    Ids that are not group members (e.g. someone who left the group) get a
    placeholder Member so their balances are still settled.
    """
    members = list(ledger.group.members)
    seen = {member.id for member in members}

    for expense in ledger.expenses:
        referenced = [payer.member_id for payer in expense.payers] + [
            detail.member_id for detail in expense.split_details
        ]
        for member_id in referenced:
            if member_id not in seen:
                seen.add(member_id)
                members.append(Member(id=member_id, name="Unknown"))

    return members


class LedgerService:
    """Service for computing balances and recording settlements on a ledger."""

    def __init__(self, settings: Settings):
        """Initialize the ledger service."""
        self.settings = settings

    def currency_for(self, ledger: Ledger) -> str:
        """Group currency, falling back to the configured default."""
        return ledger.group.currency or self.settings.currency

    def net_balances(self, ledger: Ledger) -> list[NetBalance]:
        """
        Compute each involved member's net balance.

        Returns:
            Balances rounded to cents, in member order
        """
        balances = compute_net_balances(
            active_expenses(ledger.expenses), involved_members(ledger)
        )
        return [
            NetBalance(member_id=member_id, balance=round_amount(balance))
            for member_id, balance in balances.items()
        ]

    def simplified_debts(self, ledger: Ledger) -> list[Debt]:
        """
        Compute the minimal set of transfers that settles the group.

        Settlement records are filtered out first; they are reflected in the
        ledger's history but do not feed the simplifier.
        """
        debts = simplify_debts(active_expenses(ledger.expenses), involved_members(ledger))
        logger.info(
            f"Simplified {len(ledger.expenses)} expenses in '{ledger.group.name}' "
            f"to {len(debts)} debts"
        )
        return debts

    def find_debt(self, ledger: Ledger, from_member_id: str, to_member_id: str) -> Debt:
        """
        Find the outstanding debt from one member to another.

        Raises:
            DebtNotFoundError: If the simplified debts contain no such pair
        """
        for debt in self.simplified_debts(ledger):
            if debt.from_member_id == from_member_id and debt.to_member_id == to_member_id:
                return debt
        raise DebtNotFoundError(
            f"No outstanding debt from {from_member_id} to {to_member_id}"
        )

    def add_expense(self, ledger: Ledger, expense: Expense) -> Ledger:
        """
        Validate an expense and return a new ledger that includes it.

        Raises:
            InvalidExpenseError: If payer or split totals don't match the total
        """
        validate_expense(expense)
        logger.info(f"Added expense {expense.id}: {expense.description}")
        return ledger.model_copy(update={"expenses": [*ledger.expenses, expense]})

    def record_settlement(
        self,
        ledger: Ledger,
        debt: Debt,
        amount: float | None = None,
        added_by_id: str | None = None,
        when: datetime | None = None,
    ) -> Ledger:
        """
        Record a payment that settles (part of) a debt.

        Args:
            ledger: Current ledger snapshot
            debt: The debt being paid
            amount: Amount paid, defaults to the full debt
            added_by_id: Member recording the payment
            when: Payment time, defaults to now

        Returns:
            A new ledger with the settlement appended

        Raises:
            SettlementAmountError: If amount is not within (0, debt.amount]
        """
        amount = debt.amount if amount is None else round_amount(amount)
        if not 0 < amount <= debt.amount:
            raise SettlementAmountError(amount, debt.amount)

        when = when or datetime.now()
        payer = ledger.group.get_member(debt.from_member_id)
        receiver = ledger.group.get_member(debt.to_member_id)
        payer_name = payer.display_name if payer else debt.from_member_id
        receiver_name = receiver.display_name if receiver else debt.to_member_id

        settlement = Expense(
            id=f"settle-{debt.id}-{int(when.timestamp() * 1000)}",
            description=f"Settlement: {payer_name} paid {receiver_name}",
            total_amount=amount,
            date=when,
            added_by_id=added_by_id or debt.from_member_id,
            payers=[ExpensePayer(member_id=debt.from_member_id, amount_paid=amount)],
            split_type=SplitType.EXACT_AMOUNTS,
            split_details=[ExpenseSplitDetail(member_id=debt.to_member_id, owes=amount)],
            category="Settlement",
            is_settlement=True,
        )

        logger.info(
            f"Recorded settlement of {amount:.2f} from {debt.from_member_id} "
            f"to {debt.to_member_id}"
        )

        return ledger.model_copy(update={"expenses": [*ledger.expenses, settlement]})

    def summarize(self, ledger: Ledger, member_id: str | None = None) -> GroupSummary:
        """Dashboard statistics for the ledger's group, optionally for one member."""
        return summarize_group(
            ledger.expenses,
            ledger.group.members,
            self.currency_for(ledger),
            member_id=member_id,
        )
