"""Tests for the governance scenario."""

import json

import pytest

from lending_policy.config import RegistryConfig, ScenarioConfig
from lending_policy.exceptions import PolicyRejectedError
from lending_policy.scenarios import PolicyGovernanceScenario
from lending_policy.sinks import JsonFileSink


class TestPolicyGovernanceScenario:
    """Tests for PolicyGovernanceScenario."""

    def test_generate_scenario(self, seed: int) -> None:
        scenario = PolicyGovernanceScenario(num_policies=4, num_loan_requests=30, seed=seed)

        registry = scenario.generate()

        assert registry.get_policy_count() == 4
        assert registry.active_policy_id == 3
        assert registry.authorization_oracle == "ST2VOTING"
        assert len(scenario.decisions) == 30
        assert all(d.policy_id == 3 for d in scenario.decisions)

    def test_newest_policy_updated_once(self, seed: int) -> None:
        scenario = PolicyGovernanceScenario(num_policies=2, num_loan_requests=0, seed=seed)
        registry = scenario.generate()

        assert len(registry.get_policy_history(1).updates) == 1
        assert registry.get_policy_history(0).updates == []
        assert len(scenario.history_records()) == 1
        assert scenario.history_records()[0]["policy_id"] == 1

    def test_no_violations_all_approved(self, seed: int) -> None:
        scenario = PolicyGovernanceScenario(
            num_policies=1, num_loan_requests=20, violation_rate=0.0, seed=seed
        )
        scenario.generate()

        summary = scenario.get_summary()
        assert summary["approved"] == 20
        assert summary["rejected"] == 0
        assert summary["rejections_by_error"] == {}

    def test_all_violations_rejected(self, seed: int) -> None:
        scenario = PolicyGovernanceScenario(
            num_policies=1, num_loan_requests=20, violation_rate=1.0, seed=seed
        )
        scenario.generate()

        summary = scenario.get_summary()
        assert summary["approved"] == 0
        assert summary["rejected"] == 20
        assert sum(summary["rejections_by_error"].values()) == 20

    def test_summary(self, seed: int) -> None:
        scenario = PolicyGovernanceScenario(num_policies=3, num_loan_requests=10, seed=seed)
        scenario.generate()

        summary = scenario.get_summary()

        assert summary["total_policies"] == 3
        assert summary["active_policy_id"] == 2
        assert summary["loan_requests"] == 10
        assert summary["approved"] + summary["rejected"] == 10

    def test_zero_policies(self, seed: int) -> None:
        scenario = PolicyGovernanceScenario(num_policies=0, num_loan_requests=10, seed=seed)
        registry = scenario.generate()

        assert registry.get_policy_count() == 0
        assert scenario.decisions == []

    def test_config_overrides(self, seed: int) -> None:
        config = ScenarioConfig(
            name="governance", num_policies=2, num_loan_requests=5, oracle="ST9DAO"
        )
        scenario = PolicyGovernanceScenario(seed=seed, config=config)
        registry = scenario.generate()

        assert scenario.config is config
        assert registry.authorization_oracle == "ST9DAO"
        assert registry.get_policy_count() == 2
        assert len(scenario.decisions) == 5

    def test_capacity_exhausted_raises(self, seed: int) -> None:
        scenario = PolicyGovernanceScenario(
            num_policies=3,
            num_loan_requests=0,
            seed=seed,
            registry_config=RegistryConfig(max_policies=2),
        )

        with pytest.raises(PolicyRejectedError):
            scenario.generate()

    def test_export(self, seed: int, tmp_path) -> None:
        scenario = PolicyGovernanceScenario(num_policies=2, num_loan_requests=5, seed=seed)
        scenario.generate()

        scenario.export([JsonFileSink(tmp_path)])

        policies = json.loads((tmp_path / "policies.json").read_text())
        events = json.loads((tmp_path / "policy_events.json").read_text())
        decisions = json.loads((tmp_path / "loan_decisions.json").read_text())
        history = json.loads((tmp_path / "policy_history.json").read_text())

        assert [p["policy_id"] for p in policies] == [0, 1]
        assert policies[0]["policy_type"] in ["personal", "business", "eco-friendly"]
        assert [e["event_type"] for e in events] == [
            "authorization.configured",
            "policy.created",
            "policy.created",
            "policy.updated",
        ]
        assert len(decisions) == 5
        assert history[0]["changes"] == "updated rates and amounts"
        assert len(scenario.registry.events) == 4

    def test_export_twice_keeps_events(self, seed: int, tmp_path) -> None:
        scenario = PolicyGovernanceScenario(num_policies=2, num_loan_requests=5, seed=seed)
        scenario.generate()
        first, second = tmp_path / "first", tmp_path / "second"

        scenario.export([JsonFileSink(first)])
        scenario.export([JsonFileSink(second), JsonFileSink(first)])

        for out in (first, second):
            events = json.loads((out / "policy_events.json").read_text())
            assert len(events) == 4

    def test_member_ids_differ_from_proposers(self, seed: int) -> None:
        scenario = PolicyGovernanceScenario(num_policies=3, num_loan_requests=3, seed=seed)
        registry = scenario.generate()

        proposers = {p.proposer for p in registry.list_policies()}
        members = {d.member_id for d in scenario.decisions}

        assert proposers.isdisjoint(members)
