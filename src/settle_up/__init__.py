"""SettleUp - Shared-expense ledger that settles group balances with the fewest transfers."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .models import (
    Debt,
    Expense,
    ExpensePayer,
    ExpenseSplitDetail,
    Group,
    Ledger,
    Member,
    NetBalance,
    SplitType,
)
from .service import LedgerService
from .simplifier import compute_net_balances, simplify_debts
from .splits import compute_split_details
from .store import LedgerStore

__all__ = [
    "Settings",
    "load_settings",
    "Debt",
    "Expense",
    "ExpensePayer",
    "ExpenseSplitDetail",
    "Group",
    "Ledger",
    "Member",
    "NetBalance",
    "SplitType",
    "LedgerService",
    "compute_net_balances",
    "simplify_debts",
    "compute_split_details",
    "LedgerStore",
]
