# portfolio_journal/utils/currency.py
"""
Currency display helpers.

Currencies are labels only: amounts are never converted between them.
"""

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "IDR": "Rp",
}


def get_currency_symbol(currency: str | None) -> str:
    """
    Map an ISO 4217 code to its display symbol.

    Unknown codes are returned unchanged (upper-cased), so the UI can
    always prefix amounts with something meaningful.
    """
    if not currency:
        return ""
    code = currency.upper()
    return CURRENCY_SYMBOLS.get(code, code)
