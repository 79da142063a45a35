"""Money formatting for display."""

SUPPORTED_CURRENCIES = ["USD", "EUR", "GBP", "INR", "CAD", "AUD", "JPY"]

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "CAD": "CA$",
    "AUD": "A$",
    "JPY": "¥",
}


def format_money(amount: float, currency: str = "USD") -> str:
    """
    Format an amount with its currency symbol and two decimals.

    Examples:
        format_money(1234.5) -> "$1,234.50"
        format_money(-85.02, "EUR") -> "-€85.02"
    """
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    digits = f"{abs(amount):,.2f}"
    sign = "-" if amount < 0 and digits != "0.00" else ""
    return f"{sign}{symbol}{digits}"
