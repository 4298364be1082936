"""
Test suite for session module

Tests the login state machine and the typed outcomes of operations issued
through the session.
"""

import pytest
from decimal import Decimal

from money_flow.accounts import Account, AccountType
from money_flow.ledger import Ledger
from money_flow.session import (
    LoginOutcome, OperationOutcome, OperationResult, Session, SessionState
)
from money_flow.transactions import TransactionType


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def session(ledger):
    return Session(ledger)


@pytest.fixture
def savings(ledger):
    return ledger.create_account("Saver", "4242", AccountType.SAVINGS)


@pytest.fixture
def checking(ledger):
    return ledger.create_account("Spender", "1357", AccountType.CHECKING)


class TestLogin:
    """Test the UNAUTHENTICATED / AUTHENTICATED state machine"""

    def test_initially_unauthenticated(self, session):
        assert session.state == SessionState.UNAUTHENTICATED
        assert session.current() is None
        assert not session.is_authenticated

    def test_authentication_scenario(self, session, savings):
        """Bad PIN, unknown account, then a good login and logout"""
        number = savings.account_number

        assert session.login(number, "0000") == LoginOutcome.BAD_PIN
        assert session.state == SessionState.UNAUTHENTICATED

        missing = "9999999999" if number != "9999999999" else "8888888888"
        assert session.login(missing, "4242") == LoginOutcome.NO_SUCH_ACCOUNT
        assert session.state == SessionState.UNAUTHENTICATED

        assert session.login(number, "4242") == LoginOutcome.OK
        assert session.state == SessionState.AUTHENTICATED
        assert session.current() is savings

        session.logout()
        assert session.state == SessionState.UNAUTHENTICATED
        assert session.current() is None

    def test_login_trims_whitespace(self, session, savings):
        assert session.login(f" {savings.account_number} ", " 4242 ") == LoginOutcome.OK

    def test_failed_login_keeps_current_principal(self, session, savings, checking):
        assert session.login(savings.account_number, "4242") == LoginOutcome.OK
        assert session.login(checking.account_number, "0000") == LoginOutcome.BAD_PIN
        assert session.current() is savings

        assert session.login(checking.account_number, "1357") == LoginOutcome.OK
        assert session.current() is checking

    def test_login_logout_leaves_ledger_untouched(self, session, ledger, savings):
        savings.deposit(Decimal('25.00'), "Cash")
        for _ in range(3):
            session.login(savings.account_number, "4242")
            session.logout()

        assert len(ledger) == 1
        assert savings.balance == Decimal('25.00')
        assert len(savings.history) == 1

    def test_logout_when_logged_out(self, session):
        session.logout()
        assert session.state == SessionState.UNAUTHENTICATED


class TestOperationsLoggedOut:
    """Every verb is a no-op without a principal"""

    def test_all_verbs_report_not_authenticated(self, session, savings):
        results = [
            session.deposit(Decimal('10')),
            session.withdraw(Decimal('10')),
            session.take_loan(Decimal('10')),
            session.repay_loan(Decimal('10')),
            session.apply_interest(Decimal('0.01')),
        ]
        for result in results:
            assert result.outcome == OperationOutcome.NOT_AUTHENTICATED
            assert not result.success
        assert savings.history == ()


class TestOperations:
    """Test outcomes of operations for a logged-in account"""

    def login(self, session, account, pin):
        assert session.login(account.account_number, pin) == LoginOutcome.OK

    def test_deposit_and_withdraw(self, session, checking):
        self.login(session, checking, "1357")

        result = session.deposit(Decimal('100.00'))
        assert result == OperationResult(OperationOutcome.OK, Decimal('100.00'))

        result = session.withdraw(Decimal('30.00'))
        assert result.success
        assert checking.balance == Decimal('69.50')
        assert [t.description for t in checking.history] == [
            "User Deposit", "User Withdrawal", "Withdrawal Fee"
        ]

    def test_invalid_amounts(self, session, savings):
        self.login(session, savings, "4242")
        assert session.deposit(Decimal('0')).outcome == OperationOutcome.INVALID_AMOUNT
        assert session.withdraw(Decimal('-1')).outcome == OperationOutcome.INVALID_AMOUNT
        assert session.take_loan(Decimal('0')).outcome == OperationOutcome.INVALID_AMOUNT

    def test_insufficient_funds(self, session, savings):
        self.login(session, savings, "4242")
        session.deposit(Decimal('10.00'))

        result = session.withdraw(Decimal('20.00'))
        assert result.outcome == OperationOutcome.INSUFFICIENT_FUNDS
        assert savings.balance == Decimal('10.00')
        assert len(savings.history) == 1

    def test_loan_outcomes(self, session, savings):
        self.login(session, savings, "4242")

        assert session.repay_loan(Decimal('5')).outcome == OperationOutcome.NO_LOAN
        assert session.take_loan(Decimal('500.00')).success
        assert session.take_loan(Decimal('100.00')).outcome == OperationOutcome.LOAN_OUTSTANDING

        session.withdraw(Decimal('450.00'))
        result = session.repay_loan(Decimal('100.00'))
        assert result.outcome == OperationOutcome.INSUFFICIENT_FUNDS
        assert savings.loan_balance == Decimal('500.00')

    def test_repay_reports_amount_actually_paid(self, session, savings):
        self.login(session, savings, "4242")
        session.deposit(Decimal('1000.00'))
        session.take_loan(Decimal('100.00'))

        result = session.repay_loan(Decimal('400.00'))
        assert result.success
        assert result.amount == Decimal('100.00')
        assert savings.loan_balance == Decimal('0.00')

    def test_interest(self, session, savings, checking):
        self.login(session, checking, "1357")
        session.deposit(Decimal('1000.00'))
        assert session.apply_interest(Decimal('0.01')).outcome == OperationOutcome.NOT_ELIGIBLE
        assert checking.balance == Decimal('1000.00')

        self.login(session, savings, "4242")
        assert session.apply_interest(Decimal('0.01')).outcome == OperationOutcome.NOT_ELIGIBLE

        session.deposit(Decimal('1000.00'))
        result = session.apply_interest(Decimal('0.01'))
        assert result == OperationResult(OperationOutcome.OK, Decimal('10.00'))
        assert savings.balance == Decimal('1010.00')

    def test_interest_defaults_to_configured_monthly_rate(self, session, savings):
        self.login(session, savings, "4242")
        session.deposit(Decimal('2000.00'))

        result = session.apply_interest()
        assert result.amount == Decimal('10.00')  # 0.5% of 2000
        assert savings.history[-1].transaction_type == TransactionType.INTEREST

    def test_interest_too_small_is_not_credited(self, session, savings):
        self.login(session, savings, "4242")
        session.deposit(Decimal('0.50'))
        assert session.apply_interest(Decimal('0.005')).outcome == OperationOutcome.NOT_ELIGIBLE
        assert len(savings.history) == 1

    @pytest.mark.parametrize("rate", [float('nan'), float('inf'), "abc"])
    def test_unusable_interest_rate(self, session, savings, rate):
        self.login(session, savings, "4242")
        session.deposit(Decimal('100.00'))

        result = session.apply_interest(rate)
        assert result.outcome == OperationOutcome.INVALID_AMOUNT
        assert savings.balance == Decimal('100.00')
        assert len(savings.history) == 1


class TestAccountRefusal:
    """The account's own verdict wins when it disagrees with the pre-check"""

    def test_refused_withdrawal_is_not_reported_ok(self, monkeypatch, session, savings):
        session.login(savings.account_number, "4242")
        session.deposit(Decimal('10.00'))
        monkeypatch.setattr(Account, "can_cover", lambda self, amount: True)

        result = session.withdraw(Decimal('50.00'))
        assert result == OperationResult(OperationOutcome.INSUFFICIENT_FUNDS)
        assert savings.balance == Decimal('10.00')
        assert len(savings.history) == 1

    def test_refused_deposit_is_not_reported_ok(self, monkeypatch, session, savings):
        session.login(savings.account_number, "4242")
        monkeypatch.setattr(Account, "deposit", lambda self, amount, description="Deposit": False)

        result = session.deposit(Decimal('25.00'))
        assert result == OperationResult(OperationOutcome.INVALID_AMOUNT)
        assert not result.success
        assert savings.balance == Decimal('0')

    def test_refused_loan_is_not_reported_ok(self, monkeypatch, session, savings):
        session.login(savings.account_number, "4242")
        monkeypatch.setattr(Account, "take_loan", lambda self, amount, description="": False)

        result = session.take_loan(Decimal('100.00'))
        assert result.outcome == OperationOutcome.LOAN_OUTSTANDING
        assert savings.loan_balance == Decimal('0')
        assert savings.history == ()
