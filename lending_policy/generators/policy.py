"""Policy proposal and loan request generators."""

import random
from typing import Iterator

from lending_policy.generators.base import BaseGenerator
from lending_policy.models.enums import Currency, PolicyType
from lending_policy.models.loan import LoanRequest
from lending_policy.models.policy import Policy, PolicyTerms
from lending_policy.registry.rules import NO_LOCATION_RESTRICTION

# Loan checks in the order the registry evaluates them
LOAN_CHECKS = ("amount", "collateral", "term", "credit_score", "currency", "location")


class PolicyTermsGenerator(BaseGenerator):
    """Generate policy proposals that pass every creation rule."""

    REPAYMENT_TERMS = [12, 24, 36, 60, 120, 180, 360, 720]
    GRACE_PERIODS = [0, 15, 30, 45, 60, 90]
    MIN_LOAN_AMOUNTS = [500, 1000, 2000, 5000]

    def __init__(self, seed: int | None = None, restricted_rate: float = 0.3) -> None:
        """Initialize the generator.

        Parameters
        ----------
        seed : int | None
            Random seed for reproducibility.
        restricted_rate : float
            Share of proposals restricted to a single location (0.0 to 1.0).
        """
        super().__init__(seed)
        self.restricted_rate = restricted_rate

    def generate(self, proposer: str | None = None) -> PolicyTerms:
        """Generate a valid policy proposal.

        Credit score and collateral minimums are kept above zero so every
        loan check can be violated against the resulting policy.

        Parameters
        ----------
        proposer : str | None
            Proposer principal. A random one is generated when omitted.

        Returns
        -------
        PolicyTerms
            Generated proposal.
        """
        min_loan = random.choice(self.MIN_LOAN_AMOUNTS)

        if random.random() < self.restricted_rate:
            location = self.fake.city()
        else:
            location = NO_LOCATION_RESTRICTION

        return PolicyTerms(
            interest_rate=random.randint(100, 2000),
            max_loan_amount=min_loan * random.randint(10, 200),
            min_loan_amount=min_loan,
            min_collateral=random.randint(1, 20) * 500,
            max_repayment_term=random.choice(self.REPAYMENT_TERMS),
            min_credit_score=random.randint(300, 750),
            grace_period=random.choice(self.GRACE_PERIODS),
            penalty_rate=random.randint(0, 50) * 100,
            policy_type=random.choice(list(PolicyType)).value,
            currency=random.choice(list(Currency)).value,
            location_restriction=location,
            proposer=proposer or self.principal(),
        )

    def generate_batch(self, count: int) -> Iterator[PolicyTerms]:
        """Generate multiple proposals."""
        for _ in range(count):
            yield self.generate()


class LoanRequestGenerator(BaseGenerator):
    """Generate loan requests that pass or break a policy's checks."""

    def generate(self, policy: Policy) -> LoanRequest:
        """Generate a request satisfying every check of ``policy``.

        A policy whose minimum loan exceeds its maximum admits no valid
        amount; the request then carries the minimum.
        """
        restriction = policy.location_restriction
        return LoanRequest(
            request_id=self.fake.uuid4(),
            member_id=self.principal(),
            loan_amount=random.randint(
                policy.min_loan_amount,
                max(policy.min_loan_amount, policy.max_loan_amount),
            ),
            collateral=policy.min_collateral + random.randint(0, max(policy.min_collateral, 1000)),
            repayment_term=random.randint(1, policy.max_repayment_term),
            credit_score=random.randint(policy.min_credit_score, 1000),
            member_location=(
                self.fake.city() if restriction == NO_LOCATION_RESTRICTION else restriction
            ),
            currency=Currency(policy.currency).value,
        )

    def feasible_violations(self, policy: Policy) -> list[str]:
        """Loan checks that a request can break in isolation."""
        checks = list(LOAN_CHECKS)
        if policy.min_collateral == 0:
            checks.remove("collateral")
        if policy.min_credit_score == 0:
            checks.remove("credit_score")
        if policy.location_restriction == NO_LOCATION_RESTRICTION:
            checks.remove("location")
        return checks

    def generate_violation(self, policy: Policy, check: str) -> LoanRequest:
        """Generate a request that breaks exactly ``check``.

        Raises
        ------
        ValueError
            If ``check`` is unknown or cannot be broken for ``policy``.
        """
        if check not in self.feasible_violations(policy):
            raise ValueError(f"Check {check!r} cannot be violated for this policy")

        request = self.generate(policy)

        if check == "amount":
            request.loan_amount = policy.max_loan_amount + random.randint(1, 1000)
        elif check == "collateral":
            request.collateral = policy.min_collateral - random.randint(1, policy.min_collateral)
        elif check == "term":
            request.repayment_term = policy.max_repayment_term + random.randint(1, 12)
        elif check == "credit_score":
            request.credit_score = policy.min_credit_score - random.randint(1, policy.min_credit_score)
        elif check == "currency":
            others = [c.value for c in Currency if c != Currency(policy.currency)]
            request.currency = random.choice(others)
        else:  # location
            location = self.fake.city()
            if location == policy.location_restriction:
                location = f"{location} Outskirts"
            request.member_location = location

        return request

    def generate_batch(
        self,
        policy: Policy,
        count: int,
        violation_rate: float = 0.0,
    ) -> Iterator[LoanRequest]:
        """Generate requests against ``policy``.

        Parameters
        ----------
        policy : Policy
            Policy the requests target.
        count : int
            Number of requests.
        violation_rate : float
            Share of requests breaking one randomly chosen check.

        Yields
        ------
        LoanRequest
            Generated requests.
        """
        checks = self.feasible_violations(policy)
        for _ in range(count):
            if checks and random.random() < violation_rate:
                yield self.generate_violation(policy, random.choice(checks))
            else:
                yield self.generate(policy)
