"""
Money Handling Module

Decimal amounts, display locales and the formatting helpers used by the view.
Ledger arithmetic NEVER uses float: every amount is a Decimal quantized to
two fractional digits with banker's rounding.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, getcontext
from datetime import datetime
from typing import Optional, Union
import re

from .config import get_config
from .locales import CurrencyLocale

getcontext().prec = 28

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

AmountLike = Union[Decimal, int, float, str]


def quantize(value: Decimal) -> Decimal:
    """Round to cents using round-half-to-even"""
    return value.quantize(CENT, rounding=ROUND_HALF_EVEN)


def to_amount(value: AmountLike) -> Decimal:
    """
    Coerce a numeric value to a two-place Decimal amount.

    Floats go through their string form so that 0.1 becomes Decimal('0.10')
    rather than the binary expansion.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot use {value!r} as an amount")
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to an amount")
    else:
        raise ValueError(f"Cannot use {type(value).__name__} as an amount")

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return quantize(amount)


def to_rate(value: AmountLike) -> Decimal:
    """
    Coerce an interest rate to an unrounded Decimal.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Cannot use {value!r} as a rate")
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to a rate")

    if not rate.is_finite():
        raise ValueError(f"Rate must be finite, got {value!r}")
    return rate


def parse_amount(text: str) -> Decimal:
    """
    Parse a user-entered amount such as "R1,234.50" or " 99.9 "

    Args:
        text: Raw text from an input field

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If the text is empty or not a number
    """
    if not text or not isinstance(text, str):
        raise ValueError("Amount must be a non-empty string")

    # Drop currency symbols, spaces and thousands separators
    clean_value = re.sub(r'[^\d.\-+]', '', text.strip())
    if not clean_value:
        raise ValueError(f"Cannot convert '{text}' to an amount")

    return to_amount(clean_value)


def format_currency(amount: AmountLike, locale: Optional[CurrencyLocale] = None) -> str:
    """
    Render an amount for display, e.g. R1,234.56 for the default locale.

    The locale falls back to the configured one when not given.
    """
    if locale is None:
        locale = get_config().currency_locale

    value = to_amount(amount)
    sign = "-" if value < 0 else ""
    separators = str.maketrans({",": locale.grouping, ".": locale.decimal_point})
    number = f"{abs(value):,.2f}".translate(separators)

    if locale.symbol_suffix:
        return f"{sign}{number} {locale.symbol}"
    return f"{sign}{locale.symbol}{number}"


def format_timestamp(instant: datetime) -> str:
    """Render a timestamp as YYYY-MM-DD HH:MM:SS"""
    return instant.strftime("%Y-%m-%d %H:%M:%S")
