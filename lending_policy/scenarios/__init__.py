"""Scenarios driving the policy registry end to end."""

from lending_policy.scenarios.governance import PolicyGovernanceScenario

__all__ = ["PolicyGovernanceScenario"]
