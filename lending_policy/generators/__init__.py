"""Synthetic policy proposals and loan requests."""

from lending_policy.generators.policy import (
    LOAN_CHECKS,
    LoanRequestGenerator,
    PolicyTermsGenerator,
)

__all__ = ["LOAN_CHECKS", "LoanRequestGenerator", "PolicyTermsGenerator"]
