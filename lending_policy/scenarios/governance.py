"""Governance scenario: policies voted in, then loan requests screened."""

from __future__ import annotations

import logging
import random
from typing import Any

from lending_policy.config import RegistryConfig, ScenarioConfig
from lending_policy.generators import LoanRequestGenerator, PolicyTermsGenerator
from lending_policy.models.loan import LoanDecision
from lending_policy.registry import CallContext, PolicyRegistry
from lending_policy.result import ErrorCode
from lending_policy.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


class PolicyGovernanceScenario:
    """Run a registry through a realistic governance cycle.

    This scenario:
    - Has the owner configure the voting contract as authorization oracle
    - Adds ``num_policies`` proposals, the last one ending up active
    - Updates the newest policy once (one history record)
    - Screens ``num_loan_requests`` against the active policy, a share of
      them breaking exactly one check
    """

    def __init__(
        self,
        num_policies: int = 3,
        num_loan_requests: int = 100,
        violation_rate: float = 0.2,
        seed: int | None = None,
        oracle: str = "ST2VOTING",
        registry_config: RegistryConfig | None = None,
        *,
        config: ScenarioConfig | None = None,
    ) -> None:
        """Initialize governance scenario.

        Parameters
        ----------
        num_policies : int
            Number of policies to add.
        num_loan_requests : int
            Number of loan requests to screen.
        violation_rate : float
            Share of requests breaking one policy check (0.0 to 1.0).
        seed : int | None
            Random seed for reproducibility.
        oracle : str
            Principal of the voting contract.
        registry_config : RegistryConfig | None
            Registry owner and capacity.
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides
            num_policies, num_loan_requests, violation_rate and oracle.
        """
        if config is not None:
            num_policies = config.num_policies
            num_loan_requests = config.num_loan_requests
            violation_rate = config.violation_rate
            oracle = config.oracle

        self.config = config
        self.num_policies = num_policies
        self.num_loan_requests = num_loan_requests
        self.violation_rate = violation_rate
        self.oracle = oracle
        self.seed = seed

        if seed is not None:
            random.seed(seed)

        self.registry = PolicyRegistry(registry_config)
        self.decisions: list[LoanDecision] = []
        self.height = 0
        self._terms_gen = PolicyTermsGenerator(seed=seed)
        # Offset seed so member principals differ from proposers
        self._request_gen = LoanRequestGenerator(seed=None if seed is None else seed + 1)

    def _next_context(self, caller: str) -> CallContext:
        self.height += 1
        return CallContext(caller=caller, height=self.height)

    def generate(self) -> PolicyRegistry:
        """Run the scenario.

        Returns
        -------
        PolicyRegistry
            Registry holding the resulting policies, history and events.
        """
        logger.info(
            "Starting governance scenario: %d policies, %d loan requests",
            self.num_policies,
            self.num_loan_requests,
        )

        owner_ctx = self._next_context(self.registry.owner)
        self.registry.configure_authorization(owner_ctx, self.oracle).unwrap()

        for terms in self._terms_gen.generate_batch(self.num_policies):
            self.registry.add_policy(self._next_context(self.oracle), terms).unwrap()

        active = self.registry.get_active_policy()
        if active is not None:
            self.registry.update_policy(
                self._next_context(self.oracle),
                active.policy_id,
                new_interest_rate=max(1, active.interest_rate - 50),
                new_max_loan_amount=active.max_loan_amount,
                new_min_loan_amount=active.min_loan_amount,
                new_min_collateral=active.min_collateral,
            ).unwrap()
            active = self.registry.get_active_policy()

        logger.info("Added %d policies", self.registry.get_policy_count())

        if active is not None:
            for request in self._request_gen.generate_batch(
                active, self.num_loan_requests, self.violation_rate
            ):
                self.decisions.append(self.registry.screen(request, height=self.height))

        logger.info(
            "Screened %d loan requests: %d approved",
            len(self.decisions),
            sum(1 for d in self.decisions if d.approved),
        )

        return self.registry

    def history_records(self) -> list[dict[str, Any]]:
        """Flatten every policy's history into exportable rows."""
        rows = []
        for policy in self.registry.list_policies():
            history = self.registry.get_policy_history(policy.policy_id)
            for record in history.updates if history else []:
                rows.append({"policy_id": policy.policy_id, **to_dict(record)})
        return rows

    def export(self, sinks: list[Any]) -> None:
        """Export scenario output to sinks.

        Parameters
        ----------
        sinks : list[Any]
            List of sink instances (JsonFileSink, KafkaSink, etc.).
        """
        events = self.registry.events
        for sink in sinks:
            sink.write_batch("policies", self.registry.list_policies())
            sink.write_batch("policy_history", self.history_records())
            sink.write_batch("loan_decisions", self.decisions)
            sink.write_batch("policy_events", events)

        logger.info("Exported governance scenario to %d sinks", len(sinks))

    def get_summary(self) -> dict[str, Any]:
        """Get summary statistics for the scenario.

        Returns
        -------
        dict[str, Any]
            Scenario summary statistics.
        """
        rejections: dict[str, int] = {}
        for decision in self.decisions:
            if decision.error_code is not None:
                name = ErrorCode(decision.error_code).name
                rejections[name] = rejections.get(name, 0) + 1

        approved = sum(1 for d in self.decisions if d.approved)
        return {
            "total_policies": self.registry.get_policy_count(),
            "active_policy_id": self.registry.active_policy_id,
            "loan_requests": len(self.decisions),
            "approved": approved,
            "rejected": len(self.decisions) - approved,
            "rejections_by_error": rejections,
        }
