"""
Money Flow Bank

A single-user demo bank with an in-memory ledger: checking and savings
accounts, withdrawal fees, a single loan per account and savings interest.
All financial calculations use Decimal precision.
"""

__version__ = "1.0.0"
