"""Core balance simplification: turn a list of expenses into the fewest transfers."""

import logging
import math
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .models import Debt, Expense, Member

logger = logging.getLogger(__name__)

# Half a cent. Balances this close to zero count as settled.
EPSILON = 0.005


def round_amount(amount: float) -> float:
    """
    Round an amount to 2 decimal places.
    Uses ROUND_HALF_UP on the exact binary value, so 0.125 -> 0.13 but
    2.675 (stored as 2.67499...) -> 2.67.

    Args:
        amount: Amount as float

    Returns:
        Amount rounded to cents; inf and nan are returned unchanged
    """
    if not math.isfinite(amount):
        return amount

    with localcontext() as ctx:
        # Enough digits for the largest float (~1.8e308) plus cents
        ctx.prec = 330
        cents = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(cents)


def compute_net_balances(
    expenses: Iterable[Expense], members: Iterable[Member]
) -> dict[str, float]:
    """
    Compute each member's net balance (total paid minus total owed).

    Every member starts at exactly 0. Payers and split entries that reference
    a member id not present in ``members`` are skipped.

    Args:
        expenses: Expenses to account for (settlements already filtered out)
        members: Members of the group

    Returns:
        Mapping of member id to signed balance, in member order
    """
    balances: dict[str, float] = {member.id: 0.0 for member in members}

    for expense in expenses:
        for payer in expense.payers:
            if payer.member_id in balances:
                balances[payer.member_id] += payer.amount_paid
        for detail in expense.split_details:
            if detail.member_id in balances:
                balances[detail.member_id] -= detail.owes

    return balances


def partition_balances(
    balances: dict[str, float],
) -> tuple[list[list], list[list]]:
    """
    Split balances into sorted debtors and creditors.

    Debtors are sorted ascending (largest debt first), creditors descending
    (largest credit first). Members within EPSILON of zero are left out, as
    are balances that overflowed to inf or nan.
    Both sorts are stable, so ties keep member order.

    Returns:
        Tuple of (debtors, creditors) as mutable ``[member_id, amount]`` pairs.
        Debtor amounts are negative.
    """
    debtors = []
    creditors = []

    for member_id, balance in balances.items():
        if not math.isfinite(balance):
            logger.warning(f"Skipping non-finite balance for {member_id}: {balance}")
            continue
        if balance < -EPSILON:
            debtors.append([member_id, balance])
        elif balance > EPSILON:
            creditors.append([member_id, balance])

    debtors.sort(key=lambda entry: entry[1])
    creditors.sort(key=lambda entry: entry[1], reverse=True)

    return debtors, creditors


def simplify_debts(expenses: list[Expense], members: list[Member]) -> list[Debt]:
    """
    Compute the settlement transfers that clear every member's balance.

    Steps:
    1. Accumulate net balances per member
    2. Partition into debtors and creditors, dropping settled members
    3. Sort largest debtor / largest creditor first
    4. Greedily match the current debtor with the current creditor, settling
       the smaller of the two outstanding amounts
    5. Advance whichever cursor (or both) reaches zero

    This never raises. Empty members or expenses yield an empty list, and
    input whose payer and split totals disagree yields a best-effort result.

    Args:
        expenses: Expenses to settle (settlements already filtered out)
        members: Members of the group

    Returns:
        Debts in the order they were matched
    """
    if not members:
        return []

    balances = compute_net_balances(expenses, members)
    debtors, creditors = partition_balances(balances)

    logger.debug(
        f"Simplifying {len(debtors)} debtors against {len(creditors)} creditors"
    )

    debts: list[Debt] = []
    debtor_idx = 0
    creditor_idx = 0

    while debtor_idx < len(debtors) and creditor_idx < len(creditors):
        debtor = debtors[debtor_idx]
        creditor = creditors[creditor_idx]
        amount_to_settle = min(-debtor[1], creditor[1])

        if amount_to_settle > EPSILON:
            debts.append(
                Debt(
                    from_member_id=debtor[0],
                    to_member_id=creditor[0],
                    amount=round_amount(amount_to_settle),
                    id=f"{debtor[0]}-{creditor[0]}",
                )
            )
            debtor[1] += amount_to_settle
            creditor[1] -= amount_to_settle

        if abs(debtor[1]) <= EPSILON:
            debtor_idx += 1
        if abs(creditor[1]) <= EPSILON:
            creditor_idx += 1

    unmatched = len(debtors) - debtor_idx + len(creditors) - creditor_idx
    if unmatched:
        # Only reachable when payer and split totals disagree upstream
        logger.debug(f"{unmatched} balances left unmatched after simplification")

    logger.debug(f"Produced {len(debts)} debts")
    return debts
