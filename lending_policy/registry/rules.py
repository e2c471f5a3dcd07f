"""Ordered validation rules for policy terms and loan requests.

Each check function returns the error code of the first failing rule, or
None when every rule passes. Rule order is significant: callers only ever
see one code, so the order decides which violation is reported.
"""

from __future__ import annotations

from enum import Enum

from lending_policy.models.enums import Currency, PolicyType
from lending_policy.models.policy import Policy, PolicyTerms
from lending_policy.result import ErrorCode

MAX_INTEREST_RATE = 2000  # basis points
MAX_CREDIT_SCORE = 1000
MAX_GRACE_PERIOD = 90
MAX_PENALTY_RATE = 5000  # basis points
MAX_LOCATION_LENGTH = 100
NO_LOCATION_RESTRICTION = "none"


def _is_member(enum_cls: type[Enum], value: object) -> bool:
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True


def check_rates_and_amounts(
    interest_rate: int,
    max_loan_amount: int,
    min_loan_amount: int,
    min_collateral: int,
) -> ErrorCode | None:
    """Check the fields shared by policy creation and policy updates."""
    if not 0 < interest_rate <= MAX_INTEREST_RATE:
        return ErrorCode.INVALID_INTEREST_RATE
    if max_loan_amount <= 0:
        return ErrorCode.INVALID_MAX_LOAN
    if min_loan_amount <= 0:
        return ErrorCode.INVALID_MIN_LOAN
    if min_collateral < 0:
        return ErrorCode.INVALID_MIN_COLLATERAL
    return None


def check_policy_terms(terms: PolicyTerms, caller: str) -> ErrorCode | None:
    """Check a policy proposal submitted by ``caller``.

    The relation between ``min_loan_amount`` and ``max_loan_amount`` is
    deliberately left unchecked.
    """
    code = check_rates_and_amounts(
        terms.interest_rate,
        terms.max_loan_amount,
        terms.min_loan_amount,
        terms.min_collateral,
    )
    if code is not None:
        return code
    if terms.max_repayment_term <= 0:
        return ErrorCode.INVALID_MAX_REPAYMENT
    if not 0 <= terms.min_credit_score <= MAX_CREDIT_SCORE:
        return ErrorCode.INVALID_CREDIT_SCORE
    if not 0 <= terms.grace_period <= MAX_GRACE_PERIOD:
        return ErrorCode.INVALID_GRACE_PERIOD
    if not 0 <= terms.penalty_rate <= MAX_PENALTY_RATE:
        return ErrorCode.INVALID_PENALTY_RATE
    if not _is_member(PolicyType, terms.policy_type):
        return ErrorCode.INVALID_POLICY_TYPE
    if not _is_member(Currency, terms.currency):
        return ErrorCode.INVALID_CURRENCY
    if len(terms.location_restriction) > MAX_LOCATION_LENGTH:
        return ErrorCode.INVALID_LOCATION_RESTRICTION
    if terms.proposer == caller:
        return ErrorCode.INVALID_PROPOSER
    return None


def location_allowed(restriction: str, member_location: str) -> bool:
    """Return True if a member at ``member_location`` may borrow."""
    return restriction == NO_LOCATION_RESTRICTION or member_location == restriction


def check_loan(
    policy: Policy,
    loan_amount: int,
    collateral: int,
    repayment_term: int,
    credit_score: int,
    member_location: str,
    currency: str,
) -> ErrorCode | None:
    """Check a proposed loan against ``policy``."""
    if not policy.min_loan_amount <= loan_amount <= policy.max_loan_amount:
        return ErrorCode.INVALID_LOAN_AMOUNT
    if collateral < policy.min_collateral:
        return ErrorCode.INSUFFICIENT_COLLATERAL
    if repayment_term > policy.max_repayment_term:
        return ErrorCode.INVALID_REPAYMENT_TERM
    if credit_score < policy.min_credit_score:
        return ErrorCode.INVALID_CREDIT_SCORE
    if currency != policy.currency:
        return ErrorCode.INVALID_CURRENCY
    if not location_allowed(policy.location_restriction, member_location):
        return ErrorCode.LOAN_NOT_ALLOWED
    return None
