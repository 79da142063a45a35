"""Tests for the debt simplification algorithm."""

import math
import random

import pytest
from pydantic import ValidationError

from settle_up.models import Debt, Expense, ExpensePayer, ExpenseSplitDetail, Member
from settle_up.simplifier import (
    EPSILON,
    compute_net_balances,
    partition_balances,
    round_amount,
    simplify_debts,
)


# Helper function for tests
def make_expense(
    id: str, paid: dict[str, float], owed: dict[str, float], total: float | None = None
) -> Expense:
    """Create an Expense from payer and split mappings."""
    return Expense(
        id=id,
        description=f"Test expense {id}",
        total_amount=total if total is not None else sum(paid.values()),
        payers=[ExpensePayer(member_id=m, amount_paid=a) for m, a in paid.items()],
        split_details=[ExpenseSplitDetail(member_id=m, owes=a) for m, a in owed.items()],
    )


def members(*ids: str) -> list[Member]:
    return [Member(id=member_id, name=member_id.title()) for member_id in ids]


def as_tuples(debts: list[Debt]) -> list[tuple[str, str, float]]:
    return [(d.from_member_id, d.to_member_id, d.amount) for d in debts]


class TestEmptyInputs:
    """Degenerate inputs produce no debts."""

    def test_no_expenses_no_members(self):
        assert simplify_debts([], []) == []

    def test_no_expenses(self):
        assert simplify_debts([], members("a", "b")) == []

    def test_no_members_skips_computation(self):
        """Expenses are ignored entirely when there are no members."""
        expense = make_expense("1", {"a": 100}, {"a": 50, "b": 50})
        assert simplify_debts([expense], []) == []

    def test_all_balances_zero(self):
        """Each member paid exactly their own share."""
        expenses = [
            make_expense("1", {"a": 50}, {"a": 50}),
            make_expense("2", {"b": 20}, {"b": 20}),
        ]
        assert simplify_debts(expenses, members("a", "b")) == []


class TestScenarios:
    """Worked examples with known results."""

    def test_two_party(self):
        """B owes A half of a 100 expense A paid."""
        expense = make_expense("1", {"a": 100}, {"a": 50, "b": 50})

        debts = simplify_debts([expense], members("a", "b"))

        assert len(debts) == 1
        assert debts[0].from_member_id == "b"
        assert debts[0].to_member_id == "a"
        assert debts[0].amount == 50.00
        assert debts[0].id == "b-a"

    def test_three_party_minimal_transactions(self):
        """Largest debtor is matched first against the only creditor."""
        expenses = [
            make_expense("1", {"a": 90}, {"a": 30, "b": 30, "c": 30}),
            make_expense("2", {"b": 30}, {"a": 10, "b": 10, "c": 10}),
        ]

        debts = simplify_debts(expenses, members("a", "b", "c"))

        assert as_tuples(debts) == [("c", "a", 40.00), ("b", "a", 10.00)]

    def test_debtor_split_across_two_creditors(self):
        """A debtor left with a remainder moves on to the next creditor."""
        expenses = [
            make_expense("1", {"a": 100}, {"a": 25, "b": 25, "c": 25, "d": 25}),
            make_expense("2", {"b": 60}, {"a": 15, "b": 15, "c": 15, "d": 15}),
        ]
        # a: +60, b: +20, c: -40, d: -40

        debts = simplify_debts(expenses, members("a", "b", "c", "d"))

        assert as_tuples(debts) == [
            ("c", "a", 40.00),
            ("d", "a", 20.00),
            ("d", "b", 20.00),
        ]

    def test_multiple_payers_on_one_expense(self):
        """Payer contributions are summed per member."""
        expense = make_expense(
            "1", {"a": 60, "b": 30}, {"a": 30, "b": 30, "c": 30}
        )

        debts = simplify_debts([expense], members("a", "b", "c"))

        assert as_tuples(debts) == [("c", "a", 30.00)]

    def test_ties_keep_member_order(self):
        """Equal debts are matched in the order members were given."""
        expense = make_expense("1", {"a": 90}, {"a": 30, "b": 30, "c": 30})

        forward = simplify_debts([expense], members("a", "b", "c"))
        reverse = simplify_debts([expense], members("c", "b", "a"))

        assert [d.from_member_id for d in forward] == ["b", "c"]
        assert [d.from_member_id for d in reverse] == ["c", "b"]

    def test_amounts_rounded_to_cents(self):
        """Thirds of a cent-valued total come out rounded to cents."""
        expense = make_expense(
            "1", {"a": 100}, {"a": 100 / 3, "b": 100 / 3, "c": 100 / 3}
        )

        debts = simplify_debts([expense], members("a", "b", "c"))

        assert as_tuples(debts) == [("b", "a", 33.33), ("c", "a", 33.33)]


class TestUnknownMembers:
    """Ids outside the member list are skipped, never inserted."""

    def test_unknown_split_member_ignored(self):
        expense = make_expense("1", {"a": 100}, {"a": 50, "x": 50})

        balances = compute_net_balances([expense], members("a"))

        assert balances == {"a": 50.0}

    def test_unknown_payer_ignored(self):
        expense = make_expense("1", {"x": 100}, {"a": 50, "b": 50})

        balances = compute_net_balances([expense], members("a", "b"))

        assert balances == {"a": -50.0, "b": -50.0}

    def test_unknown_members_leave_unmatched_balance(self):
        """Only a creditor is known, so there is no one to match against."""
        expense = make_expense("1", {"a": 100}, {"a": 50, "x": 50})

        assert simplify_debts([expense], members("a")) == []


class TestTolerance:
    """Balances within half a cent of zero count as settled."""

    def test_below_tolerance_produces_no_debt(self):
        expense = make_expense("1", {"a": 0.004}, {"b": 0.004})

        assert simplify_debts([expense], members("a", "b")) == []

    def test_above_tolerance_produces_debt(self):
        expense = make_expense("1", {"a": 0.006}, {"b": 0.006})

        debts = simplify_debts([expense], members("a", "b"))

        assert as_tuples(debts) == [("b", "a", 0.01)]

    def test_partition_excludes_near_zero(self):
        debtors, creditors = partition_balances(
            {"a": 10.0, "b": -0.004, "c": 0.005, "d": -10.0}
        )

        assert debtors == [["d", -10.0]]
        assert creditors == [["a", 10.0]]

    def test_partition_sort_order(self):
        debtors, creditors = partition_balances(
            {"a": 5.0, "b": -1.0, "c": 20.0, "d": -30.0, "e": -2.0}
        )

        assert [d[0] for d in debtors] == ["d", "e", "b"]
        assert [c[0] for c in creditors] == ["c", "a"]

    def test_floating_point_drift_absorbed(self):
        """Ten 0.1 payments don't leave a stray sub-cent debt."""
        expenses = [make_expense(str(i), {"a": 0.1}, {"b": 0.1}) for i in range(10)]
        expenses.append(make_expense("back", {"b": 1.0}, {"a": 1.0}))

        assert simplify_debts(expenses, members("a", "b")) == []


class TestUnbalancedInput:
    """Inconsistent payer/split totals give a best-effort result."""

    def test_split_short_of_payment(self):
        expense = make_expense("1", {"a": 100}, {"b": 60}, total=100)

        debts = simplify_debts([expense], members("a", "b"))

        assert as_tuples(debts) == [("b", "a", 60.00)]

    def test_never_raises(self):
        expense = make_expense("1", {"a": 10}, {"b": 70, "c": 5}, total=10)

        debts = simplify_debts([expense], members("a", "b", "c"))

        assert sum(d.amount for d in debts) == pytest.approx(10.0)


class TestRoundAmount:
    """Tests for round_amount."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (50.0, 50.0),
            (0.006, 0.01),
            (33.333333, 33.33),
            (0.125, 0.13),
            (2.675, 2.67),
            (1.005, 1.0),
        ],
    )
    def test_round_half_up(self, value, expected):
        """Ties round up on the exact binary value, like toFixed(2)."""
        assert round_amount(value) == expected

    @pytest.mark.parametrize("value", [2e28, 1.5e300, -3e40])
    def test_huge_amounts(self, value):
        assert round_amount(value) == value

    def test_non_finite_returned_unchanged(self):
        assert round_amount(float("inf")) == float("inf")
        assert math.isnan(round_amount(float("nan")))


class TestExtremeAmounts:
    """Very large or non-finite amounts never make simplification raise."""

    def test_huge_expense_settles(self):
        expense = make_expense("1", {"a": 2e28}, {"b": 2e28})

        debts = simplify_debts([expense], members("a", "b"))

        assert as_tuples(debts) == [("b", "a", 2e28)]

    def test_overflowed_balances_skipped(self):
        """Two near-max payments overflow to inf and are left out."""
        expenses = [
            make_expense("1", {"a": 1.7e308}, {"b": 1.0}),
            make_expense("2", {"a": 1.7e308}, {"b": 1.0}),
        ]

        debts = simplify_debts(expenses, members("a", "b"))

        assert debts == []

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    def test_models_reject_non_finite(self, value):
        with pytest.raises(ValidationError):
            ExpensePayer(member_id="a", amount_paid=value)
        with pytest.raises(ValidationError):
            ExpenseSplitDetail(member_id="a", owes=value)


class TestProperties:
    """Invariants over randomly generated, internally consistent ledgers."""

    @staticmethod
    def random_ledger(seed: int) -> tuple[list[Expense], list[Member]]:
        rng = random.Random(seed)
        group = members(*[f"m{i}" for i in range(rng.randint(2, 7))])
        ids = [m.id for m in group]
        expenses = []
        for n in range(rng.randint(1, 12)):
            cents = rng.randint(1, 50_000)
            participants = rng.sample(ids, rng.randint(1, len(ids)))
            base, remainder = divmod(cents, len(participants))
            owed = {
                member_id: (base + (1 if i < remainder else 0)) / 100
                for i, member_id in enumerate(participants)
            }
            expenses.append(make_expense(str(n), {rng.choice(ids): cents / 100}, owed))
        return expenses, group

    @pytest.mark.parametrize("seed", range(25))
    def test_debts_conserve_balances(self, seed):
        """Each member's debts add up to their net balance."""
        expenses, group = self.random_ledger(seed)
        balances = compute_net_balances(expenses, group)

        debts = simplify_debts(expenses, group)

        for member_id, balance in balances.items():
            outgoing = sum(d.amount for d in debts if d.from_member_id == member_id)
            incoming = sum(d.amount for d in debts if d.to_member_id == member_id)
            assert incoming - outgoing == pytest.approx(balance, abs=0.01)

    @pytest.mark.parametrize("seed", range(25))
    def test_no_self_debt_and_positive_amounts(self, seed):
        expenses, group = self.random_ledger(seed)

        debts = simplify_debts(expenses, group)

        for debt in debts:
            assert debt.from_member_id != debt.to_member_id
            assert debt.amount > EPSILON

    @pytest.mark.parametrize("seed", range(25))
    def test_transaction_count_bounded(self, seed):
        """At most one fewer transfer than members with a balance."""
        expenses, group = self.random_ledger(seed)
        debtors, creditors = partition_balances(compute_net_balances(expenses, group))

        debts = simplify_debts(expenses, group)

        assert len(debts) <= max(len(debtors) + len(creditors) - 1, 0)

    @pytest.mark.parametrize("seed", range(10))
    def test_pair_ids_unique_within_result(self, seed):
        expenses, group = self.random_ledger(seed)

        debts = simplify_debts(expenses, group)

        assert len({d.id for d in debts}) == len(debts)

    def test_idempotent(self):
        expenses, group = self.random_ledger(42)

        assert simplify_debts(expenses, group) == simplify_debts(expenses, group)

    def test_inputs_not_mutated(self):
        expenses, group = self.random_ledger(7)
        before = [e.model_dump() for e in expenses]

        simplify_debts(expenses, group)

        assert [e.model_dump() for e in expenses] == before
