"""Custom exceptions for SettleUp."""


class SettleUpError(Exception):
    """Base exception for all SettleUp errors."""

    pass


class ConfigurationError(SettleUpError):
    """Raised when configuration is invalid or missing."""

    pass


class LedgerLoadError(SettleUpError):
    """Raised when a ledger snapshot cannot be read or parsed."""

    pass


class InvalidExpenseError(SettleUpError):
    """Raised when an expense's payer or split totals don't match its total."""

    def __init__(self, expense_id: str, message: str):
        self.expense_id = expense_id
        super().__init__(f"Expense {expense_id}: {message}")


class InvalidSplitError(SettleUpError):
    """Raised when split details cannot be computed from the given values."""

    pass


class SettlementAmountError(SettleUpError):
    """Raised when a settlement amount is outside (0, debt amount]."""

    def __init__(self, amount: float, max_amount: float, message: str | None = None):
        self.amount = amount
        self.max_amount = max_amount
        super().__init__(
            message
            or f"Settlement amount {amount:.2f} must be between 0.01 and {max_amount:.2f}"
        )


class DebtNotFoundError(SettleUpError):
    """Raised when no outstanding debt exists between two members."""

    pass
