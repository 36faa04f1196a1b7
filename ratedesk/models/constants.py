"""Domain constants: the static currency code table.

Validity of a code is membership in CURRENCY_NAMES, nothing else. Providers
return many more codes than listed here; those are kept in rate tables but
cannot be used as request inputs.
"""

from typing import Dict, Optional, Set

from ratedesk.core.errors import InvalidCurrencyCode

CURRENCY_NAMES: Dict[str, str] = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CNY": "Chinese Yuan",
    "AUD": "Australian Dollar",
    "CAD": "Canadian Dollar",
    "CHF": "Swiss Franc",
    "PKR": "Pakistani Rupee",
    "INR": "Indian Rupee",
    "SAR": "Saudi Riyal",
    "AED": "UAE Dirham",
    "TRY": "Turkish Lira",
    "BDT": "Bangladeshi Taka",
    "LKR": "Sri Lankan Rupee",
    "ZAR": "South African Rand",
    "NZD": "New Zealand Dollar",
    "SEK": "Swedish Krona",
    "NOK": "Norwegian Krone",
    "DKK": "Danish Krone",
    "HKD": "Hong Kong Dollar",
    "SGD": "Singapore Dollar",
}
CURRENCIES: Set[str] = set(CURRENCY_NAMES)

USD = "USD"
DEFAULT_BASE = USD
TIMESERIES_RANGES_DAYS = (7, 30, 90, 180, 365)


def _clean(code: Optional[str]) -> str:
    return (code or "").strip().upper()


def is_valid(code: Optional[str]) -> bool:
    return _clean(code) in CURRENCIES


def name_of(code: str) -> str:
    """Display name for a code; unknown codes fall back to the cleaned code itself."""
    norm = _clean(code)
    return CURRENCY_NAMES.get(norm, norm)


def normalize_code(code: Optional[str]) -> str:
    """Uppercase and validate a user-supplied code, raising InvalidCurrencyCode."""
    norm = _clean(code)
    if not is_valid(norm):
        raise InvalidCurrencyCode(norm or code)
    return norm
