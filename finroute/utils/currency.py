"""Currency display helpers."""

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
    "GBP": "£",
    "NGN": "₦",
    "ZAR": "R",
    "KES": "KSh",
    "CNY": "¥",
    "INR": "₹",
    "SGD": "S$",
}


def currency_symbol(code: str) -> str:
    """
    Map a currency code to its display symbol.

    Unknown codes pass through unchanged.

    Examples:
        >>> currency_symbol("NGN")
        '₦'
        >>> currency_symbol("CHF")
        'CHF'
    """
    return CURRENCY_SYMBOLS.get(code, code)
