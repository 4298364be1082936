"""Demo data for the Money Flow bank

Opens two demo accounts with fixed numbers so the app can be tried
without creating an account first:
- 1234567890 / PIN 1234, Alice Smith, savings
- 0987654321 / PIN 4321, Bob Johnson, checking
"""

from decimal import Decimal
from typing import List

from .accounts import Account, AccountType
from .ledger import Ledger
from .logging_config import get_logger


logger = get_logger("money_flow.seed")

DEMO_ACCOUNTS = [
    # (account number, pin, holder, type, (deposit, description), (withdrawal, description))
    ("1234567890", "1234", "Alice Smith", AccountType.SAVINGS,
     (Decimal("1500.00"), "Initial Deposit"), (Decimal("50.00"), "Groceries")),
    ("0987654321", "4321", "Bob Johnson", AccountType.CHECKING,
     (Decimal("2500.00"), "Salary"), (Decimal("100.00"), "Bills")),
]


def seed_demo_accounts(ledger: Ledger) -> List[Account]:
    """Open the demo accounts that are not in the ledger yet"""
    created = []
    for account_number, pin, holder, account_type, deposit, withdrawal in DEMO_ACCOUNTS:
        if account_number in ledger:
            continue
        account = ledger.create_account(holder, pin, account_type, account_number=account_number)
        account.deposit(*deposit)
        account.withdraw(*withdrawal)
        created.append(account)

    logger.info("Seeded %d demo accounts", len(created))
    return created
