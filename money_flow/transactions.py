"""
Transaction Records Module

Immutable entries appended to an account's history, one per ledger change.
"""

from decimal import Decimal
from datetime import datetime
from dataclasses import dataclass, field
from typing import Any, Dict
from enum import Enum

from .currency import format_timestamp, to_amount


class TransactionType(Enum):
    """Kinds of ledger change recorded in account history"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INTEREST = "interest"
    LOAN_TAKEN = "loan_taken"
    LOAN_REPAYMENT = "loan_repayment"
    FEE = "fee"


@dataclass(frozen=True)
class Transaction:
    """
    One ledger change on one account.
    The timestamp is stamped at construction.
    """
    transaction_type: TransactionType
    amount: Decimal
    description: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        amount = to_amount(self.amount)
        if amount < 0:
            raise ValueError("Transaction amount cannot be negative")
        object.__setattr__(self, 'amount', amount)

    def __str__(self) -> str:
        return (
            f"[{format_timestamp(self.timestamp)}] {self.transaction_type.name}: "
            f"{self.amount:.2f} ({self.description})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_type": self.transaction_type.name,
            "amount": str(self.amount),
            "description": self.description,
            "timestamp": format_timestamp(self.timestamp),
        }
