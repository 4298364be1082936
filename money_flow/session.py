"""
Session Module

Tracks whether the user is logged in and to which account, and mediates
every operation the view issues. Operations report a typed outcome instead
of raising, and do nothing while logged out.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Callable, Optional
from enum import Enum

from .accounts import Account
from .config import get_config
from .currency import AmountLike, ZERO, quantize, to_amount, to_rate
from .ledger import Ledger
from .logging_config import get_logger, log_action


logger = get_logger("money_flow.session")


class SessionState(Enum):
    """Session states"""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class LoginOutcome(Enum):
    """Result of a login attempt"""
    OK = "ok"
    NO_SUCH_ACCOUNT = "no_such_account"
    BAD_PIN = "bad_pin"


class OperationOutcome(Enum):
    """Result of an operation issued through the session"""
    OK = "ok"
    NOT_AUTHENTICATED = "not_authenticated"
    INVALID_AMOUNT = "invalid_amount"        # Amount not positive
    INSUFFICIENT_FUNDS = "insufficient_funds"
    LOAN_OUTSTANDING = "loan_outstanding"    # A loan is already open
    NO_LOAN = "no_loan"                      # Nothing to repay
    NOT_ELIGIBLE = "not_eligible"            # Interest on checking or empty savings


@dataclass(frozen=True)
class OperationResult:
    """Outcome plus the amount the operation moved"""
    outcome: OperationOutcome
    amount: Decimal = ZERO

    @property
    def success(self) -> bool:
        return self.outcome == OperationOutcome.OK


NOT_AUTHENTICATED = OperationResult(OperationOutcome.NOT_AUTHENTICATED)


class Session:
    """
    Login state for the single user of the process.

    UNAUTHENTICATED --login ok--> AUTHENTICATED(account) --logout--> UNAUTHENTICATED
    """

    def __init__(self, ledger: Ledger):
        self.ledger = ledger
        self._principal: Optional[Account] = None

    @property
    def state(self) -> SessionState:
        if self._principal is None:
            return SessionState.UNAUTHENTICATED
        return SessionState.AUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self._principal is not None

    def current(self) -> Optional[Account]:
        """The logged-in account, or None"""
        return self._principal

    def login(self, account_number: str, pin: str) -> LoginOutcome:
        """
        Authenticate against the ledger.

        A failed attempt leaves the session exactly as it was.
        """
        account_number = account_number.strip()
        if self.ledger.lookup(account_number) is None:
            outcome = LoginOutcome.NO_SUCH_ACCOUNT
        else:
            account = self.ledger.authenticate(account_number, pin.strip())
            if account is None:
                outcome = LoginOutcome.BAD_PIN
            else:
                self._principal = account
                outcome = LoginOutcome.OK

        log_action(
            logger, "info" if outcome == LoginOutcome.OK else "warning",
            "Login attempt", account_number=account_number,
            action="login", outcome=outcome.name
        )
        return outcome

    def logout(self) -> None:
        if self._principal is not None:
            log_action(
                logger, "info", "Logout",
                account_number=self._principal.account_number, action="logout"
            )
        self._principal = None

    def _dispatch(
        self,
        action: str,
        amount: Optional[AmountLike],
        precheck: Callable[[Account, Decimal], Optional[OperationOutcome]],
        operation: Callable[[Account, Decimal], Optional[Decimal]],
        refusal: OperationOutcome
    ) -> OperationResult:
        """
        Run one operation against the principal.

        precheck classifies a rejection from the pre-state. operation performs
        the verb and returns the amount moved, or None when the account
        refused it, which is reported as refusal.
        """
        account = self._principal
        if account is None:
            log_action(logger, "warning", "Operation while logged out",
                       action=action, outcome=NOT_AUTHENTICATED.outcome.name)
            return NOT_AUTHENTICATED

        value = to_amount(amount) if amount is not None else ZERO
        failure = precheck(account, value)
        if failure is None:
            moved = operation(account, value)
            if moved is None:
                result = OperationResult(refusal)
            else:
                result = OperationResult(OperationOutcome.OK, moved)
        else:
            result = OperationResult(failure)

        log_action(
            logger, "info" if result.success else "warning",
            f"{action} {result.outcome.name.lower()}",
            account_number=account.account_number, action=action,
            outcome=result.outcome.name,
            extra={"amount": str(result.amount if result.success else value)}
        )
        return result

    def deposit(self, amount: AmountLike, description: str = "User Deposit") -> OperationResult:
        def precheck(account, value):
            if value <= ZERO:
                return OperationOutcome.INVALID_AMOUNT
            return None

        def operation(account, value):
            return value if account.deposit(value, description) else None

        return self._dispatch("deposit", amount, precheck, operation, OperationOutcome.INVALID_AMOUNT)

    def withdraw(self, amount: AmountLike, description: str = "User Withdrawal") -> OperationResult:
        def precheck(account, value):
            if value <= ZERO:
                return OperationOutcome.INVALID_AMOUNT
            if not account.can_cover(value):
                return OperationOutcome.INSUFFICIENT_FUNDS
            return None

        def operation(account, value):
            return value if account.withdraw(value, description) else None

        return self._dispatch(
            "withdraw", amount, precheck, operation, OperationOutcome.INSUFFICIENT_FUNDS
        )

    def take_loan(self, amount: AmountLike) -> OperationResult:
        def precheck(account, value):
            if account.has_outstanding_loan:
                return OperationOutcome.LOAN_OUTSTANDING
            if value <= ZERO:
                return OperationOutcome.INVALID_AMOUNT
            return None

        def operation(account, value):
            return value if account.take_loan(value) else None

        return self._dispatch(
            "take_loan", amount, precheck, operation, OperationOutcome.LOAN_OUTSTANDING
        )

    def repay_loan(self, amount: AmountLike) -> OperationResult:
        def precheck(account, value):
            if not account.has_outstanding_loan:
                return OperationOutcome.NO_LOAN
            if value <= ZERO:
                return OperationOutcome.INVALID_AMOUNT
            if account.balance < min(value, account.loan_balance):
                return OperationOutcome.INSUFFICIENT_FUNDS
            return None

        def operation(account, value):
            before = account.balance
            if not account.repay_loan(value):
                return None
            return before - account.balance

        return self._dispatch(
            "repay_loan", amount, precheck, operation, OperationOutcome.INSUFFICIENT_FUNDS
        )

    def apply_interest(self, rate: Optional[AmountLike] = None) -> OperationResult:
        """Apply interest at the given rate, or the configured monthly rate"""
        if rate is None:
            rate = get_config().monthly_interest_rate
        try:
            rate = to_rate(rate)
        except ValueError:
            rate = None

        def precheck(account, value):
            if rate is None:
                return OperationOutcome.INVALID_AMOUNT
            if not account.is_interest_eligible:
                return OperationOutcome.NOT_ELIGIBLE
            # Rates at or below zero, or interest that rounds to nothing
            if quantize(account.balance * rate) <= ZERO:
                return OperationOutcome.NOT_ELIGIBLE
            return None

        def operation(account, value):
            interest = account.apply_interest(rate)
            return interest if interest > ZERO else None

        return self._dispatch(
            "apply_interest", None, precheck, operation, OperationOutcome.NOT_ELIGIBLE
        )
