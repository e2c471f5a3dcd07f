"""Policy models."""

from dataclasses import dataclass, field

from lending_policy.models.enums import Currency, PolicyType


@dataclass(frozen=True)
class PolicyTerms:
    """Caller-supplied fields of a policy proposal.

    Rates are in basis points, terms in repayment periods.
    """

    interest_rate: int
    max_loan_amount: int
    min_loan_amount: int
    min_collateral: int
    max_repayment_term: int
    min_credit_score: int
    grace_period: int
    penalty_rate: int
    policy_type: str
    currency: str
    location_restriction: str
    proposer: str


@dataclass
class Policy:
    """Stored lending policy."""

    policy_id: int
    interest_rate: int
    max_loan_amount: int
    min_loan_amount: int
    min_collateral: int
    max_repayment_term: int
    min_credit_score: int
    grace_period: int
    penalty_rate: int
    policy_type: PolicyType
    currency: Currency
    location_restriction: str  # "none" means unrestricted
    proposer: str
    approved_at: int  # Logical height at creation
    is_active: bool = True

    @classmethod
    def from_terms(cls, policy_id: int, terms: PolicyTerms, approved_at: int) -> "Policy":
        """Build an active policy from validated terms."""
        return cls(
            policy_id=policy_id,
            interest_rate=terms.interest_rate,
            max_loan_amount=terms.max_loan_amount,
            min_loan_amount=terms.min_loan_amount,
            min_collateral=terms.min_collateral,
            max_repayment_term=terms.max_repayment_term,
            min_credit_score=terms.min_credit_score,
            grace_period=terms.grace_period,
            penalty_rate=terms.penalty_rate,
            policy_type=PolicyType(terms.policy_type),
            currency=Currency(terms.currency),
            location_restriction=terms.location_restriction,
            proposer=terms.proposer,
            approved_at=approved_at,
        )


@dataclass(frozen=True)
class HistoryRecord:
    """One entry of a policy's update log."""

    updater: str
    timestamp: int  # Logical height of the update
    changes: str


@dataclass
class PolicyHistory:
    """Append-only update log of a single policy."""

    updates: list[HistoryRecord] = field(default_factory=list)
