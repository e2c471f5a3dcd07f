"""Loan request models."""

from dataclasses import dataclass


@dataclass
class LoanRequest:
    """Loan proposed by a member, screened against the active policy."""

    request_id: str
    member_id: str
    loan_amount: int
    collateral: int
    repayment_term: int
    credit_score: int
    member_location: str
    currency: str


@dataclass
class LoanDecision:
    """Outcome of screening a loan request."""

    request_id: str
    member_id: str
    policy_id: int | None  # Active policy at screening time
    approved: bool
    error_code: int | None
    height: int
