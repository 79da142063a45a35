"""Group spending statistics for the dashboard."""

from .models import CategoryTotal, Expense, GroupSummary, Member, MemberSummary
from .simplifier import round_amount


def summarize_group(
    expenses: list[Expense],
    members: list[Member],
    currency: str = "USD",
    member_id: str | None = None,
) -> GroupSummary:
    """
    Summarize group spending. Settlements are excluded.

    When ``member_id`` is given, that member's paid and share totals are
    also returned as ``member``.

    Members are listed by total paid, highest first. Payments or shares from
    ids outside ``members`` still count towards the group total but get their
    own row so nothing is silently lost.
    """
    spending = [expense for expense in expenses if not expense.is_settlement]

    names = {member.id: member.display_name for member in members}
    paid: dict[str, float] = {member.id: 0.0 for member in members}
    share: dict[str, float] = {member.id: 0.0 for member in members}
    categories: dict[str, float] = {}
    total = 0.0

    for expense in spending:
        total += expense.total_amount
        for payer in expense.payers:
            paid[payer.member_id] = paid.get(payer.member_id, 0.0) + payer.amount_paid
            share.setdefault(payer.member_id, 0.0)
        for detail in expense.split_details:
            share[detail.member_id] = share.get(detail.member_id, 0.0) + detail.owes
            paid.setdefault(detail.member_id, 0.0)
        if expense.category:
            categories[expense.category] = (
                categories.get(expense.category, 0.0) + expense.total_amount
            )

    member_rows = sorted(
        (
            MemberSummary(
                member_id=row_id,
                name=names.get(row_id, "Unknown"),
                total_paid=round_amount(paid[row_id]),
                total_share=round_amount(share[row_id]),
            )
            for row_id in paid
        ),
        key=lambda row: row.total_paid,
        reverse=True,
    )

    category_rows = sorted(
        (
            CategoryTotal(name=name, total=round_amount(value))
            for name, value in categories.items()
        ),
        key=lambda row: row.total,
        reverse=True,
    )

    top_payer = member_rows[0] if member_rows and member_rows[0].total_paid > 0 else None

    return GroupSummary(
        currency=currency,
        total_spending=round_amount(total),
        average_per_head=round_amount(total / len(members)) if members else 0.0,
        members=member_rows,
        categories=category_rows,
        top_payer=top_payer,
        member=next((row for row in member_rows if row.member_id == member_id), None),
    )
