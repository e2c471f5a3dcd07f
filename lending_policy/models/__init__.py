"""Domain models for the lending policy registry."""

from lending_policy.models.base import Event
from lending_policy.models.enums import Currency, PolicyType
from lending_policy.models.loan import LoanDecision, LoanRequest
from lending_policy.models.policy import HistoryRecord, Policy, PolicyHistory, PolicyTerms

__all__ = [
    "Currency",
    "Event",
    "HistoryRecord",
    "LoanDecision",
    "LoanRequest",
    "Policy",
    "PolicyHistory",
    "PolicyTerms",
    "PolicyType",
]
