"""Locale-aware number, currency, percent and date formatting.

Hindi and Marathi readers get the `hi_IN` locale, everyone else `en_IN`,
so amounts use Indian digit grouping (12,34,567) in both.
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from babel.dates import format_date, format_datetime
from babel.numbers import format_decimal

RUPEE = "₹"
CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def get_locale(lang: str | None) -> str:
    if lang in ("hi", "mr"):
        return "hi_IN"
    return "en_IN"


def _round(value: float, digits: int) -> Decimal:
    quantum = Decimal(1).scaleb(-digits)
    return Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)


def _decimal(value: float, lang: str, max_digits: int) -> str:
    return format_decimal(_round(value, max_digits), locale=get_locale(lang))


def format_localized_number(num: float, lang: str) -> str:
    return format_decimal(num, locale=get_locale(lang))


def format_localized_currency(amount: float, lang: str) -> str:
    if amount >= CRORE:
        return f"{RUPEE}{_decimal(amount / CRORE, lang, 2)}Cr"
    if amount >= LAKH:
        return f"{RUPEE}{_decimal(amount / LAKH, lang, 2)}L"
    if amount >= THOUSAND:
        return f"{RUPEE}{_decimal(amount / THOUSAND, lang, 1)}K"
    return f"{RUPEE}{_decimal(amount, lang, 0)}"


def format_localized_percent(percent: float, lang: str) -> str:
    return f"{_decimal(percent, lang, 0)}%"


def format_localized_date(value: date | datetime | str, pattern: str, lang: str) -> str:
    """Format with a CLDR pattern such as ``"dd MMM yyyy"``."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        return format_datetime(value, pattern, locale=get_locale(lang))
    return format_date(value, pattern, locale=get_locale(lang))


def format_date_for_export(value: date | datetime | str | None) -> str:
    if not value:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()
