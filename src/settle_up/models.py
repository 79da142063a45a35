"""Pydantic domain models for SettleUp."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Group Models
# ============================================================================


class Member(BaseModel):
    """A group member. Only the id is meaningful to the balance logic."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    email: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.id


class Group(BaseModel):
    """A group of members sharing expenses."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    members: list[Member] = Field(default_factory=list)
    currency: str | None = None  # falls back to the configured currency

    def get_member(self, member_id: str) -> Member | None:
        """Find a member by id."""
        for member in self.members:
            if member.id == member_id:
                return member
        return None


# ============================================================================
# Expense Models
# ============================================================================


class SplitType(str, Enum):
    """How an expense's cost is allocated to members."""

    EQUALLY = "EQUALLY"
    EXACT_AMOUNTS = "EXACT_AMOUNTS"
    PERCENTAGE = "PERCENTAGE"
    SHARES = "SHARES"


class ExpensePayer(BaseModel):
    """A member's contribution towards paying an expense."""

    model_config = ConfigDict(extra="ignore")

    member_id: str
    amount_paid: float = Field(ge=0, allow_inf_nan=False)


class ExpenseSplitDetail(BaseModel):
    """A member's allocated share of an expense."""

    model_config = ConfigDict(extra="ignore")

    member_id: str
    owes: float = Field(ge=0, allow_inf_nan=False)
    percentage: float | None = None  # PERCENTAGE splits only
    shares: float | None = None  # SHARES splits only


class Expense(BaseModel):
    """A shared expense (or a recorded settlement between two members)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    description: str = ""
    total_amount: float = Field(gt=0, allow_inf_nan=False)
    date: datetime = Field(default_factory=datetime.now)
    added_by_id: str | None = None
    payers: list[ExpensePayer] = Field(min_length=1)
    split_type: SplitType = SplitType.EXACT_AMOUNTS
    split_details: list[ExpenseSplitDetail] = Field(default_factory=list)
    category: str | None = None
    is_settlement: bool = False  # True = settle-up payment, excluded from balances

    def total_paid(self) -> float:
        """Sum of all payer contributions."""
        return sum(payer.amount_paid for payer in self.payers)

    def total_owed(self) -> float:
        """Sum of all allocated shares."""
        return sum(detail.owes for detail in self.split_details)


class Ledger(BaseModel):
    """A snapshot of one group and its expenses."""

    model_config = ConfigDict(extra="ignore")

    group: Group
    expenses: list[Expense] = Field(default_factory=list)


# ============================================================================
# Result Models
# ============================================================================


class NetBalance(BaseModel):
    """A member's total paid minus total owed.

    Positive = creditor (is owed money), negative = debtor (owes money).
    """

    member_id: str
    balance: float


class Debt(BaseModel):
    """A single transfer needed to settle the group.

    The id combines the two member ids. It is unique within one simplification
    result but must not be treated as stable across recomputations.
    """

    model_config = ConfigDict(frozen=True)

    from_member_id: str
    to_member_id: str
    amount: float = Field(gt=0, allow_inf_nan=False)
    id: str


class MemberSummary(BaseModel):
    """Spending statistics for one member."""

    member_id: str
    name: str
    total_paid: float
    total_share: float


class CategoryTotal(BaseModel):
    """Total spent in a single expense category."""

    name: str
    total: float


class GroupSummary(BaseModel):
    """Dashboard statistics for a group, settlements excluded."""

    currency: str
    total_spending: float
    average_per_head: float
    members: list[MemberSummary] = Field(default_factory=list)
    categories: list[CategoryTotal] = Field(default_factory=list)
    top_payer: MemberSummary | None = None
    member: MemberSummary | None = None  # the requesting member, when given
