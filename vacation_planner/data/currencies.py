"""
Supported currencies and their display metadata.

The icon identity is kept as plain data next to the currency code; renderers
look it up, nothing here dispatches on it.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrencyInfo:
    """Display metadata for a supported currency."""

    code: str
    name: str
    symbol: str
    icon: str


CURRENCIES: dict[str, CurrencyInfo] = {
    "USD": CurrencyInfo("USD", "US Dollar", "$", "dollar-sign"),
    "INR": CurrencyInfo("INR", "Indian Rupee", "₹", "indian-rupee"),
    "GBP": CurrencyInfo("GBP", "British Pound", "£", "pound-sterling"),
    "EUR": CurrencyInfo("EUR", "Euro", "€", "euro"),
    "JPY": CurrencyInfo("JPY", "Japanese Yen", "¥", "banknote"),
    "AED": CurrencyInfo("AED", "UAE Dirham", "د.إ", "wallet-cards"),
    "MYR": CurrencyInfo("MYR", "Malaysian Ringgit", "RM", "dollar-sign"),
    "SGD": CurrencyInfo("SGD", "Singapore Dollar", "S$", "dollar-sign"),
}

SUPPORTED_CURRENCIES: tuple[str, ...] = tuple(CURRENCIES)

# Currencies shown without minor units
_ZERO_DECIMAL = {"JPY"}


def is_supported(currency_code: str) -> bool:
    """Check whether a currency code is in the supported set."""
    return currency_code.upper() in CURRENCIES


def get_currency(currency_code: str | None) -> CurrencyInfo:
    """
    Look up display metadata for a currency code.

    Args:
        currency_code: ISO 4217 currency code

    Returns:
        The matching CurrencyInfo, or the first supported currency when the
        code is unknown or missing
    """
    if currency_code and currency_code.upper() in CURRENCIES:
        return CURRENCIES[currency_code.upper()]
    return CURRENCIES[SUPPORTED_CURRENCIES[0]]


def format_price(amount: float, currency: str = "USD", decimal_places: int = 2) -> str:
    """
    Format a price with the appropriate currency symbol.

    Args:
        amount: Price amount
        currency: ISO 4217 currency code
        decimal_places: Number of decimal places to show

    Returns:
        Formatted price string
    """
    symbol = get_currency(currency).symbol

    if currency.upper() in _ZERO_DECIMAL:
        return f"{symbol}{int(amount)}"

    return f"{symbol}{amount:.{decimal_places}f}"
