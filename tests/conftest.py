"""Pytest configuration and fixtures."""

import pytest

from lending_policy.models import PolicyTerms
from lending_policy.registry import CallContext, PolicyRegistry

OWNER = "ST1VOTER"
ORACLE = "ST2VOTING"
PROPOSER = "ST3PROPOSER"


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def owner_ctx() -> CallContext:
    """Call context of the registry owner."""
    return CallContext(caller=OWNER, height=1)


@pytest.fixture
def oracle_ctx() -> CallContext:
    """Call context of the authorization oracle."""
    return CallContext(caller=ORACLE, height=10)


@pytest.fixture
def sample_terms() -> PolicyTerms:
    """Personal STX policy without location restriction."""
    return PolicyTerms(
        interest_rate=500,
        max_loan_amount=100000,
        min_loan_amount=1000,
        min_collateral=5000,
        max_repayment_term=360,
        min_credit_score=600,
        grace_period=30,
        penalty_rate=1000,
        policy_type="personal",
        currency="STX",
        location_restriction="none",
        proposer=PROPOSER,
    )


@pytest.fixture
def business_terms() -> PolicyTerms:
    """Business USD policy restricted to CityY."""
    return PolicyTerms(
        interest_rate=600,
        max_loan_amount=150000,
        min_loan_amount=2000,
        min_collateral=6000,
        max_repayment_term=720,
        min_credit_score=650,
        grace_period=45,
        penalty_rate=1500,
        policy_type="business",
        currency="USD",
        location_restriction="CityY",
        proposer="ST4PROPOSER",
    )


@pytest.fixture
def registry() -> PolicyRegistry:
    """Fresh registry with no oracle configured."""
    return PolicyRegistry()


@pytest.fixture
def authorized_registry(registry: PolicyRegistry, owner_ctx: CallContext) -> PolicyRegistry:
    """Registry whose oracle is configured."""
    registry.configure_authorization(owner_ctx, ORACLE).unwrap()
    return registry
