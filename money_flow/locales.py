"""
Display Locales

Currency symbol placement and separators used when rendering amounts.
"""

from enum import Enum


class CurrencyLocale(Enum):
    """Display locales with symbol placement and separators"""
    EN_ZA = ("R", ",", ".", False)   # South African Rand, R1,234.56
    EN_US = ("$", ",", ".", False)   # US Dollar, $1,234.56
    EN_GB = ("£", ",", ".", False)   # Pound Sterling, £1,234.56
    DE_DE = ("€", ".", ",", True)    # Euro, 1.234,56 €

    def __init__(self, symbol: str, grouping: str, decimal_point: str, symbol_suffix: bool):
        self.symbol = symbol
        self.grouping = grouping
        self.decimal_point = decimal_point
        self.symbol_suffix = symbol_suffix

    @classmethod
    def parse(cls, value) -> 'CurrencyLocale':
        """Accept a CurrencyLocale or its name, e.g. "en_za" """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ValueError(f"Unknown currency locale: {value!r}")
