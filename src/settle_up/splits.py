"""Split computation: allocate an expense's total across participants."""

import logging

from .exceptions import InvalidSplitError
from .models import ExpenseSplitDetail, SplitType
from .simplifier import EPSILON, round_amount

logger = logging.getLogger(__name__)


def _positive_values(
    participants: list[str], values: dict[str, float]
) -> list[tuple[str, float]]:
    """Keep participants with a positive value, in participant order."""
    return [
        (member_id, float(values[member_id]))
        for member_id in participants
        if values.get(member_id) is not None and float(values[member_id]) > 0
    ]


def compute_split_details(
    split_type: SplitType,
    total_amount: float,
    participants: list[str],
    values: dict[str, float] | None = None,
) -> list[ExpenseSplitDetail]:
    """
    Compute how much each participant owes for an expense.

    Split types:
    - EQUALLY: total divided evenly, ``values`` ignored
    - EXACT_AMOUNTS: ``values`` are amounts and must sum to the total
    - PERCENTAGE: ``values`` are percentages and must sum to 100
    - SHARES: ``values`` are share weights, total weight must be positive

    Participants with a missing or non-positive value are dropped for the
    value-based types. Each line is rounded to cents, then any leftover
    rounding drift is added to the first line that owes something.

    Args:
        split_type: How to split
        total_amount: Expense total
        participants: Member ids taking part, in display order
        values: Per-member amounts, percentages or shares

    Returns:
        List of split details summing to ``total_amount``

    Raises:
        InvalidSplitError: If the inputs can't produce a valid split
    """
    if not participants:
        raise InvalidSplitError(f"Select participants for {split_type.value} split")
    if total_amount <= 0:
        raise InvalidSplitError(f"Total amount must be positive, got {total_amount}")

    values = values or {}
    details: list[ExpenseSplitDetail]

    if split_type == SplitType.EQUALLY:
        per_participant = round_amount(total_amount / len(participants))
        details = [
            ExpenseSplitDetail(member_id=member_id, owes=per_participant)
            for member_id in participants
        ]

    elif split_type == SplitType.EXACT_AMOUNTS:
        entered = sum(float(values.get(member_id) or 0) for member_id in participants)
        if abs(entered - total_amount) > EPSILON:
            raise InvalidSplitError(
                f"Sum of exact amounts ({entered:.2f}) must match "
                f"total expense ({total_amount:.2f})"
            )
        details = [
            ExpenseSplitDetail(member_id=member_id, owes=round_amount(amount))
            for member_id, amount in _positive_values(participants, values)
        ]

    elif split_type == SplitType.PERCENTAGE:
        entered = sum(float(values.get(member_id) or 0) for member_id in participants)
        if abs(entered - 100) > EPSILON:
            raise InvalidSplitError(f"Sum of percentages ({entered:g}%) must be 100%")
        details = [
            ExpenseSplitDetail(
                member_id=member_id,
                owes=round_amount(pct / 100 * total_amount),
                percentage=pct,
            )
            for member_id, pct in _positive_values(participants, values)
        ]

    elif split_type == SplitType.SHARES:
        weighted = _positive_values(participants, values)
        total_shares = sum(share for _member_id, share in weighted)
        if total_shares <= 0:
            raise InvalidSplitError("Total shares must be greater than 0")
        details = [
            ExpenseSplitDetail(
                member_id=member_id,
                owes=round_amount(share / total_shares * total_amount),
                shares=share,
            )
            for member_id, share in weighted
        ]

    else:
        raise InvalidSplitError(f"Unknown split type: {split_type}")

    if not details:
        raise InvalidSplitError(
            f"Enter valid values for selected participants ({split_type.value})"
        )

    return _adjust_for_rounding(details, total_amount)


def _adjust_for_rounding(
    details: list[ExpenseSplitDetail], total_amount: float
) -> list[ExpenseSplitDetail]:
    """Push any rounding drift onto the first line that owes something."""
    allocated = sum(detail.owes for detail in details)
    difference = total_amount - allocated

    if abs(difference) <= EPSILON:
        return details

    target = next((detail for detail in details if detail.owes > 0), details[0])
    target.owes = round_amount(target.owes + difference)

    logger.debug(
        f"Applied rounding adjustment of {difference:.4f} to {target.member_id}"
    )

    return details
