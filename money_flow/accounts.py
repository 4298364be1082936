"""
Account Management Module

Accounts hold a balance, at most one outstanding loan and an append-only
transaction history. Fee and interest rules are functions of the account
type: checking withdrawals carry a fixed fee, savings accounts earn interest.

Verbs report failure by return value and leave the account untouched;
they never raise for an ordinary rejected operation.
"""

from decimal import Decimal
from typing import List, Tuple
from enum import Enum

from .config import get_config
from .currency import AmountLike, ZERO, quantize, to_amount, to_rate
from .transactions import Transaction, TransactionType


WITHDRAWAL_FEE_DESCRIPTION = "Withdrawal Fee"
INTEREST_DESCRIPTION = "Monthly Interest Earned"
LOAN_TAKEN_DESCRIPTION = "Loan Taken"
LOAN_REPAYMENT_DESCRIPTION = "Loan Repayment"


class AccountType(Enum):
    """Banking product types"""
    CHECKING = "checking"    # Fee-bearing withdrawals, no interest
    SAVINGS = "savings"      # No fee, earns interest

    @classmethod
    def parse(cls, value) -> 'AccountType':
        """Accept an AccountType, its name or its value"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            if key.upper() in cls.__members__:
                return cls[key.upper()]
            return cls(key.lower())
        raise ValueError(f"Unknown account type: {value!r}")


def withdrawal_fee_for(account_type: AccountType) -> Decimal:
    """Fee added to the debit of a withdrawal for the given account type"""
    if account_type == AccountType.CHECKING:
        return to_amount(get_config().checking_withdrawal_fee)
    return ZERO


class Account:
    """
    Bank account with balance, loan balance and transaction history.

    Identity, PIN and type are fixed at construction. Balances change only
    through the operation methods below, so every attribute is read-only.
    """

    def __init__(self, account_number: str, pin: str, holder_name: str, account_type: AccountType):
        self._account_number = account_number
        self._pin = pin
        self._holder_name = holder_name
        self._account_type = AccountType.parse(account_type)
        self._balance = ZERO
        self._loan_balance = ZERO
        self._history: List[Transaction] = []

    def __repr__(self) -> str:
        return (
            f"Account(account_number={self._account_number!r}, holder_name={self._holder_name!r}, "
            f"account_type={self._account_type.name}, balance={self._balance}, "
            f"loan_balance={self._loan_balance})"
        )

    @property
    def account_number(self) -> str:
        return self._account_number

    @property
    def holder_name(self) -> str:
        return self._holder_name

    @property
    def account_type(self) -> AccountType:
        return self._account_type

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def loan_balance(self) -> Decimal:
        return self._loan_balance

    @property
    def history(self) -> Tuple[Transaction, ...]:
        """Transactions in the order they were recorded"""
        return tuple(self._history)

    @property
    def has_outstanding_loan(self) -> bool:
        return self._loan_balance > ZERO

    @property
    def is_interest_eligible(self) -> bool:
        """Savings accounts with a positive balance earn interest"""
        return self._account_type == AccountType.SAVINGS and self._balance > ZERO

    @property
    def withdrawal_fee(self) -> Decimal:
        return withdrawal_fee_for(self._account_type)

    def verify_pin(self, pin: str) -> bool:
        return self._pin == pin

    def can_cover(self, amount: AmountLike) -> bool:
        """Check whether the balance covers a withdrawal including its fee"""
        return self._balance >= to_amount(amount) + self.withdrawal_fee

    def _record(self, transaction_type: TransactionType, amount: Decimal, description: str) -> None:
        self._history.append(Transaction(transaction_type, amount, description))

    def deposit(self, amount: AmountLike, description: str = "Deposit") -> bool:
        """
        Credit the account.

        Returns:
            False if the amount is not positive
        """
        amount = to_amount(amount)
        if amount <= ZERO:
            return False

        self._balance += amount
        self._record(TransactionType.DEPOSIT, amount, description)
        return True

    def withdraw(self, amount: AmountLike, description: str = "Withdrawal") -> bool:
        """
        Debit the account by amount plus the withdrawal fee.

        The withdrawal entry records the requested amount; the fee, when
        there is one, gets its own entry. Both entries are written or neither.

        Returns:
            False if the amount is not positive or the balance cannot cover it
        """
        amount = to_amount(amount)
        if amount <= ZERO:
            return False

        fee = self.withdrawal_fee
        if self._balance < amount + fee:
            return False

        self._balance -= amount + fee
        self._record(TransactionType.WITHDRAWAL, amount, description)
        if fee > ZERO:
            self._record(TransactionType.FEE, fee, WITHDRAWAL_FEE_DESCRIPTION)
        return True

    def apply_interest(self, rate: AmountLike) -> Decimal:
        """
        Credit balance * rate to an eligible savings account.

        Args:
            rate: Per-application rate, e.g. 0.005 for 0.5%

        Returns:
            The interest credited, zero when nothing was applied
        """
        if not self.is_interest_eligible:
            return ZERO

        try:
            rate = to_rate(rate)
        except ValueError:
            return ZERO

        interest = quantize(self._balance * rate)
        # Rates at or below zero and amounts that round to nothing credit nothing
        if interest <= ZERO:
            return ZERO

        self._balance += interest
        self._record(TransactionType.INTEREST, interest, INTEREST_DESCRIPTION)
        return interest

    def take_loan(self, amount: AmountLike, description: str = LOAN_TAKEN_DESCRIPTION) -> bool:
        """
        Take out a loan; the principal is credited to the balance.

        Returns:
            False if the amount is not positive or a loan is already outstanding
        """
        amount = to_amount(amount)
        if amount <= ZERO or self.has_outstanding_loan:
            return False

        self._loan_balance = amount
        self._balance += amount
        self._record(TransactionType.LOAN_TAKEN, amount, description)
        return True

    def repay_loan(self, amount: AmountLike, description: str = LOAN_REPAYMENT_DESCRIPTION) -> bool:
        """
        Repay part or all of the outstanding loan.

        A repayment larger than the loan is capped at the loan balance, so
        only what is owed leaves the account and the entry records that.

        Returns:
            False if the amount is not positive, there is no loan, or the
            balance cannot cover the repayment
        """
        amount = to_amount(amount)
        if amount <= ZERO or not self.has_outstanding_loan:
            return False

        payment = min(amount, self._loan_balance)
        if self._balance < payment:
            return False

        self._balance -= payment
        self._loan_balance = max(self._loan_balance - payment, ZERO)
        self._record(TransactionType.LOAN_REPAYMENT, payment, description)
        return True

    def statement(self) -> List[str]:
        """History rendered one line per transaction"""
        return [str(txn) for txn in self._history]
