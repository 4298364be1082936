"""
Ledger Module

Process-wide registry of accounts keyed by account number. The ledger owns
account creation, including minting unique 10-digit account numbers, and
credential-checked lookup.
"""

import random
import re
from typing import Dict, List, Optional

from .accounts import Account, AccountType
from .logging_config import get_logger, log_action


ACCOUNT_NUMBER_DIGITS = 10
PIN_PATTERN = re.compile(r"[0-9]{4}")
ACCOUNT_NUMBER_PATTERN = re.compile(r"[0-9]{%d}" % ACCOUNT_NUMBER_DIGITS)

logger = get_logger("money_flow.ledger")


def validate_new_account(holder_name: str, pin: str, account_type) -> Optional[str]:
    """
    Check the inputs for a new account.

    Returns:
        A message describing the first problem found, or None when valid
    """
    if not holder_name or not holder_name.strip() or not pin:
        return "Name and PIN cannot be empty."
    if not PIN_PATTERN.fullmatch(pin):
        return "PIN must be a 4-digit number."
    try:
        AccountType.parse(account_type)
    except ValueError:
        return f"Unknown account type: {account_type}"
    return None


class Ledger:
    """
    Registry mapping account number -> Account
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._accounts: Dict[str, Account] = {}
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, account_number: str) -> bool:
        return account_number in self._accounts

    def accounts(self) -> List[Account]:
        """Snapshot of all accounts"""
        return list(self._accounts.values())

    def _generate_account_number(self) -> str:
        """Draw random 10-digit numbers until one is not in use"""
        upper = 10 ** ACCOUNT_NUMBER_DIGITS
        while True:
            candidate = f"{self._rng.randrange(upper):0{ACCOUNT_NUMBER_DIGITS}d}"
            if candidate not in self._accounts:
                return candidate

    def create_account(
        self,
        holder_name: str,
        pin: str,
        account_type,
        account_number: Optional[str] = None
    ) -> Account:
        """
        Open a new account with zero balance and no loan.

        Args:
            holder_name: Account holder, must not be blank
            pin: Exactly four decimal digits
            account_type: AccountType or its name ("CHECKING" / "SAVINGS")
            account_number: Specific account number (generated if not provided)

        Returns:
            Created Account object

        Raises:
            ValueError: If any input is invalid or the account number is taken
        """
        problem = validate_new_account(holder_name, pin, account_type)
        if problem:
            raise ValueError(problem)

        if account_number is None:
            account_number = self._generate_account_number()
        elif not ACCOUNT_NUMBER_PATTERN.fullmatch(account_number):
            raise ValueError(f"Account number must be {ACCOUNT_NUMBER_DIGITS} digits")
        elif account_number in self._accounts:
            raise ValueError(f"Account number {account_number} already exists")

        account = Account(
            account_number=account_number,
            pin=pin,
            holder_name=holder_name.strip(),
            account_type=AccountType.parse(account_type)
        )
        self._accounts[account_number] = account

        log_action(
            logger, "info", "Account created",
            account_number=account_number, action="create_account",
            extra={"account_type": account.account_type.name}
        )
        return account

    def lookup(self, account_number: str) -> Optional[Account]:
        """Get account by number without checking credentials"""
        return self._accounts.get(account_number)

    def authenticate(self, account_number: str, pin: str) -> Optional[Account]:
        """Return the account if it exists and the PIN matches"""
        account = self.lookup(account_number)
        if account is not None and account.verify_pin(pin):
            return account
        return None
