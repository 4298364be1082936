"""
FastAPI View Module

HTTP front end for the Money Flow bank. It plays the part of the teller
window: it parses what the user typed, issues operations through the
session and re-reads the account to render the dashboard. All banking
rules live in the core; this module only maps outcomes to responses.
"""

from decimal import Decimal
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from .accounts import Account, AccountType
from .config import get_config
from .currency import format_currency, parse_amount, to_rate
from .ledger import Ledger, validate_new_account
from .logging_config import get_logger, setup_logging
from .seed import seed_demo_accounts
from .session import LoginOutcome, OperationOutcome, OperationResult, Session


logger = get_logger("money_flow.api")


# Pydantic models for API requests
class CreateAccountRequest(BaseModel):
    holder_name: str
    pin: str
    account_type: str = Field("SAVINGS", description="Account type (CHECKING or SAVINGS)")


class LoginRequest(BaseModel):
    account_number: str
    pin: str


class AmountRequest(BaseModel):
    amount: str = Field(..., description="Amount as typed by the user, e.g. \"150.00\"")


class InterestRequest(BaseModel):
    rate: Optional[str] = Field(None, description="Decimal rate as string; configured monthly rate if omitted")


NOT_LOGGED_IN = "Please log in first."
INVALID_AMOUNT_INPUT = "Invalid amount. Please enter a number."

OUTCOME_STATUS = {
    OperationOutcome.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    OperationOutcome.INVALID_AMOUNT: status.HTTP_400_BAD_REQUEST,
    OperationOutcome.INSUFFICIENT_FUNDS: status.HTTP_409_CONFLICT,
    OperationOutcome.LOAN_OUTSTANDING: status.HTTP_409_CONFLICT,
    OperationOutcome.NO_LOAN: status.HTTP_409_CONFLICT,
    OperationOutcome.NOT_ELIGIBLE: status.HTTP_409_CONFLICT,
}


def get_ledger(request: Request) -> Ledger:
    return request.app.state.ledger


def get_session(request: Request) -> Session:
    return request.app.state.session


def require_account(session: Session = Depends(get_session)) -> Account:
    """Dependency for endpoints that need a logged-in account"""
    account = session.current()
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=NOT_LOGGED_IN)
    return account


def read_amount(text: str) -> Decimal:
    """Parse user input; parse failures never reach the core"""
    try:
        return parse_amount(text)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_AMOUNT_INPUT)


def raise_for_outcome(result: OperationResult, messages: Dict[OperationOutcome, str]) -> None:
    if result.success:
        return
    detail = messages.get(result.outcome)
    if detail is None:
        detail = NOT_LOGGED_IN if result.outcome == OperationOutcome.NOT_AUTHENTICATED else result.outcome.value
    raise HTTPException(status_code=OUTCOME_STATUS[result.outcome], detail=detail)


def render_dashboard(account: Account) -> Dict[str, Any]:
    """Everything the dashboard shows for the logged-in account"""
    history = account.history
    return {
        "account_number": account.account_number,
        "holder_name": account.holder_name,
        "account_type": account.account_type.name,
        "welcome": (
            f"Welcome, {account.holder_name} "
            f"(Acc: {account.account_number} | Type: {account.account_type.name})"
        ),
        "balance": str(account.balance),
        "balance_display": format_currency(account.balance),
        "loan_balance": str(account.loan_balance),
        "loan_display": format_currency(account.loan_balance),
        "transactions": [txn.to_dict() for txn in history],
        "statement": account.statement() if history else ["No transactions yet."],
    }


def create_app(ledger: Optional[Ledger] = None, session: Optional[Session] = None) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        ledger: Ledger to serve; a fresh one (seeded per config) if omitted
        session: Session over that ledger; created if omitted
    """
    config = get_config()

    if ledger is None:
        ledger = Ledger()
        if config.seed_demo_accounts:
            seed_demo_accounts(ledger)
    if session is None:
        session = Session(ledger)

    app = FastAPI(
        title="Money Flow Bank",
        description="Single-user demo bank: accounts, deposits, withdrawals, loans and interest",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.ledger = ledger
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "money_flow",
            "version": "1.0.0"
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Money Flow Bank",
            "version": "1.0.0",
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "accounts": "/accounts",
                "session": "/session",
            }
        }

    @app.post("/accounts", status_code=status.HTTP_201_CREATED)
    async def create_account(request: CreateAccountRequest, ledger: Ledger = Depends(get_ledger)):
        """Open a new account"""
        holder_name = request.holder_name.strip()
        pin = request.pin.strip()
        problem = validate_new_account(holder_name, pin, request.account_type)
        if problem:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=problem)

        account = ledger.create_account(holder_name, pin, AccountType.parse(request.account_type))
        return {
            "account_number": account.account_number,
            "account_type": account.account_type.name,
            "message": f"Account created! Your Account Number: {account.account_number}"
        }

    @app.post("/session/login")
    async def login(request: LoginRequest, session: Session = Depends(get_session)):
        """Log in with account number and PIN"""
        outcome = session.login(request.account_number, request.pin)
        if outcome == LoginOutcome.NO_SUCH_ACCOUNT:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Account not found. Please create an account or check details."
            )
        if outcome == LoginOutcome.BAD_PIN:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect PIN. Please try again."
            )
        return render_dashboard(session.current())

    @app.post("/session/logout")
    async def logout(session: Session = Depends(get_session)):
        session.logout()
        return {"message": "Logged out"}

    @app.get("/session")
    async def dashboard(account: Account = Depends(require_account)):
        """Dashboard for the logged-in account"""
        return render_dashboard(account)

    @app.post("/session/deposit")
    async def deposit(request: AmountRequest, session: Session = Depends(get_session)):
        result = session.deposit(read_amount(request.amount))
        raise_for_outcome(result, {
            OperationOutcome.INVALID_AMOUNT: "Deposit amount must be positive.",
        })
        return {
            "message": f"Successfully deposited {format_currency(result.amount)}",
            "dashboard": render_dashboard(session.current()),
        }

    @app.post("/session/withdraw")
    async def withdraw(request: AmountRequest, session: Session = Depends(get_session)):
        result = session.withdraw(read_amount(request.amount))
        raise_for_outcome(result, {
            OperationOutcome.INVALID_AMOUNT: "Insufficient funds or invalid amount.",
            OperationOutcome.INSUFFICIENT_FUNDS: "Insufficient funds or invalid amount.",
        })
        account = session.current()
        message = f"Successfully withdrew {format_currency(result.amount)}"
        if account.withdrawal_fee > 0:
            message += " (Fee Applied)"
        return {"message": message, "dashboard": render_dashboard(account)}

    @app.post("/session/loan")
    async def take_loan(request: AmountRequest, session: Session = Depends(get_session)):
        result = session.take_loan(read_amount(request.amount))
        raise_for_outcome(result, {
            OperationOutcome.LOAN_OUTSTANDING: "You already have an outstanding loan. Repay it first.",
            OperationOutcome.INVALID_AMOUNT: "Loan amount must be positive.",
        })
        return {
            "message": f"Loan of {format_currency(result.amount)} successfully taken.",
            "dashboard": render_dashboard(session.current()),
        }

    @app.post("/session/loan/repay")
    async def repay_loan(request: AmountRequest, session: Session = Depends(get_session)):
        amount = read_amount(request.amount)
        account = session.current()
        # Over-repayment is turned away here rather than capped by the core
        if account is not None and account.has_outstanding_loan and amount > account.loan_balance:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=(
                    "Repayment amount exceeds outstanding loan. "
                    f"Repay {format_currency(account.loan_balance)}"
                )
            )

        result = session.repay_loan(amount)
        raise_for_outcome(result, {
            OperationOutcome.NO_LOAN: "You have no outstanding loan to repay.",
            OperationOutcome.INVALID_AMOUNT: "Insufficient funds to repay loan or invalid amount.",
            OperationOutcome.INSUFFICIENT_FUNDS: "Insufficient funds to repay loan or invalid amount.",
        })
        return {
            "message": f"Successfully repaid {format_currency(result.amount)} of your loan.",
            "dashboard": render_dashboard(session.current()),
        }

    @app.post("/session/interest")
    async def apply_interest(
        request: Optional[InterestRequest] = None,
        session: Session = Depends(get_session)
    ):
        rate = None
        if request is not None and request.rate is not None:
            try:
                rate = to_rate(request.rate)
            except ValueError:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid interest rate.")

        account = session.current()
        if account is not None and account.account_type != AccountType.SAVINGS:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Interest can only be applied to Savings accounts."
            )

        result = session.apply_interest(rate)
        raise_for_outcome(result, {
            OperationOutcome.NOT_ELIGIBLE: "No interest earned (balance is zero or not a savings account).",
        })
        return {
            "message": f"Interest of {format_currency(result.amount)} applied to your savings account!",
            "interest": str(result.amount),
            "dashboard": render_dashboard(session.current()),
        }

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None):
    """Run the FastAPI server"""
    config = get_config()
    setup_logging(config.log_level, fmt=config.log_format, log_file=config.log_file)

    uvicorn.run(
        create_app(),
        host=host or config.api_host,
        port=port or config.api_port,
        log_level=config.log_level.lower()
    )
