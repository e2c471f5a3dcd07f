"""Policy registry enforcing lending rules for the protocol.

The registry holds every policy ever created, tracks which one is active and
screens proposed loans against it. Mutations are restricted to the
authorization oracle (the governance voting contract), which itself can only
be configured by the registry owner.

Caller identity and logical height are supplied explicitly through
:class:`CallContext` on every mutating call. Every operation returns a
:class:`~lending_policy.result.Result`; rule violations never raise.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from lending_policy.config import RegistryConfig
from lending_policy.models.base import Event
from lending_policy.models.loan import LoanDecision, LoanRequest
from lending_policy.models.policy import HistoryRecord, Policy, PolicyHistory, PolicyTerms
from lending_policy.registry.rules import (
    check_loan,
    check_policy_terms,
    check_rates_and_amounts,
)
from lending_policy.registry.state import RegistryState
from lending_policy.result import ErrorCode, Result

logger = logging.getLogger(__name__)

EVENT_SOURCE = "policy-registry"
UPDATE_DESCRIPTION = "updated rates and amounts"


@dataclass(frozen=True)
class CallContext:
    """Identity and logical height of the transaction making a call."""

    caller: str
    height: int = 0


class PolicyRegistry:
    """Bounded registry of lending policies with a single active policy."""

    def __init__(self, config: RegistryConfig | None = None) -> None:
        """Initialize an empty registry.

        Parameters
        ----------
        config : RegistryConfig | None
            Owner principal and capacity. Defaults to ``RegistryConfig()``.

        Raises
        ------
        ConfigurationError
            If the configuration is invalid.
        """
        self.config = config or RegistryConfig()
        self.config.validate()
        self._lock = threading.RLock()
        self._state = RegistryState(max_policies=self.config.max_policies)
        self._events: list[Event] = []

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self.config.owner

    @property
    def max_policies(self) -> int:
        return self._state.max_policies

    @property
    def authorization_oracle(self) -> str | None:
        with self._lock:
            return self._state.authorization_oracle

    @property
    def active_policy_id(self) -> int | None:
        with self._lock:
            return self._state.active_policy_id

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def configure_authorization(self, ctx: CallContext, oracle: str) -> Result[bool]:
        """Set the principal allowed to mutate policies.

        Only the registry owner may call this; the oracle can be reassigned.
        """
        with self._lock:
            if ctx.caller != self.config.owner:
                return self._reject("configure_authorization", ErrorCode.NOT_AUTHORIZED)

            previous = self._state.authorization_oracle
            self._state.authorization_oracle = oracle
            self._record(
                "authorization.configured",
                subject=oracle,
                data={"oracle": oracle, "previous": previous},
                ctx=ctx,
            )
            logger.info("Authorization oracle set to %s", oracle)
            return Result.success(True)

    def add_policy(self, ctx: CallContext, terms: PolicyTerms) -> Result[int]:
        """Create a policy and make it the active one.

        Returns
        -------
        Result[int]
            The new policy id on success.
        """
        with self._lock:
            state = self._state
            if state.at_capacity:
                return self._reject("add_policy", ErrorCode.MAX_POLICIES_EXCEEDED)

            code = self._check_authorized(ctx) or check_policy_terms(terms, ctx.caller)
            if code is not None:
                return self._reject("add_policy", code)

            policy_id = state.next_policy_id
            state.policies[policy_id] = Policy.from_terms(policy_id, terms, approved_at=ctx.height)
            state.history[policy_id] = PolicyHistory()
            previous_active = state.active_policy_id
            state.active_policy_id = policy_id
            state.next_policy_id += 1

            self._record(
                "policy.created",
                subject=str(policy_id),
                data={
                    "policy_type": state.policies[policy_id].policy_type.value,
                    "currency": state.policies[policy_id].currency.value,
                    "proposer": terms.proposer,
                    "replaced_active": previous_active,
                },
                ctx=ctx,
            )
            logger.info(
                "Policy %d created by %s (proposer=%s) at height %d",
                policy_id,
                ctx.caller,
                terms.proposer,
                ctx.height,
            )
            return Result.success(policy_id)

    def update_policy(
        self,
        ctx: CallContext,
        policy_id: int,
        new_interest_rate: int,
        new_max_loan_amount: int,
        new_min_loan_amount: int,
        new_min_collateral: int,
    ) -> Result[bool]:
        """Replace a policy's rate, loan bounds and collateral minimum.

        All other fields, including ``is_active`` and ``approved_at``, are
        kept. One history record is appended per successful update.
        """
        with self._lock:
            code = self._check_authorized(ctx)
            if code is not None:
                return self._reject("update_policy", code)

            policy = self._state.policies.get(policy_id)
            if policy is None:
                return self._reject("update_policy", ErrorCode.POLICY_NOT_FOUND)

            code = check_rates_and_amounts(
                new_interest_rate,
                new_max_loan_amount,
                new_min_loan_amount,
                new_min_collateral,
            )
            if code is not None:
                return self._reject("update_policy", code)

            self._state.policies[policy_id] = replace(
                policy,
                interest_rate=new_interest_rate,
                max_loan_amount=new_max_loan_amount,
                min_loan_amount=new_min_loan_amount,
                min_collateral=new_min_collateral,
            )
            history = self._state.history.setdefault(policy_id, PolicyHistory())
            history.updates.append(
                HistoryRecord(updater=ctx.caller, timestamp=ctx.height, changes=UPDATE_DESCRIPTION)
            )

            self._record(
                "policy.updated",
                subject=str(policy_id),
                data={
                    "interest_rate": new_interest_rate,
                    "max_loan_amount": new_max_loan_amount,
                    "min_loan_amount": new_min_loan_amount,
                    "min_collateral": new_min_collateral,
                },
                ctx=ctx,
            )
            logger.info("Policy %d updated by %s at height %d", policy_id, ctx.caller, ctx.height)
            return Result.success(True)

    def deactivate_policy(self, ctx: CallContext, policy_id: int) -> Result[bool]:
        """Mark a policy inactive, clearing the active pointer if it pointed here.

        Deactivating an inactive policy succeeds again.
        """
        with self._lock:
            code = self._check_authorized(ctx)
            if code is not None:
                return self._reject("deactivate_policy", code)

            policy = self._state.policies.get(policy_id)
            if policy is None:
                return self._reject("deactivate_policy", ErrorCode.POLICY_NOT_FOUND)

            policy.is_active = False
            was_active = self._state.active_policy_id == policy_id
            if was_active:
                self._state.active_policy_id = None

            self._record(
                "policy.deactivated",
                subject=str(policy_id),
                data={"was_active": was_active},
                ctx=ctx,
            )
            logger.info("Policy %d deactivated by %s", policy_id, ctx.caller)
            return Result.success(True)

    def reset(self) -> None:
        """Drop every policy, the oracle and recorded events."""
        with self._lock:
            self._state = RegistryState(max_policies=self.config.max_policies)
            self._events.clear()
            logger.debug("Registry reset")

    # ------------------------------------------------------------------
    # Loan validation
    # ------------------------------------------------------------------

    def validate_loan(
        self,
        loan_amount: int,
        collateral: int,
        repayment_term: int,
        credit_score: int,
        member_location: str,
        currency: str,
    ) -> Result[bool]:
        """Check a proposed loan against the active policy. Never mutates."""
        with self._lock:
            if self._state.active_policy_id is None:
                return self._reject("validate_loan", ErrorCode.NO_ACTIVE_POLICY)

            policy = self._state.active_policy()
            if policy is None:
                return self._reject("validate_loan", ErrorCode.POLICY_NOT_FOUND)

            code = check_loan(
                policy,
                loan_amount,
                collateral,
                repayment_term,
                credit_score,
                member_location,
                currency,
            )
            if code is not None:
                return self._reject("validate_loan", code)
            return Result.success(True)

    def screen(self, request: LoanRequest, height: int = 0) -> LoanDecision:
        """Validate a loan request and record the outcome as a decision."""
        with self._lock:
            result = self.validate_loan(
                request.loan_amount,
                request.collateral,
                request.repayment_term,
                request.credit_score,
                request.member_location,
                request.currency,
            )
            return LoanDecision(
                request_id=request.request_id,
                member_id=request.member_id,
                policy_id=self._state.active_policy_id,
                approved=result.ok,
                error_code=None if result.ok else int(result.value),
                height=height,
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_policy(self, policy_id: int) -> Policy | None:
        with self._lock:
            policy = self._state.policies.get(policy_id)
            return replace(policy) if policy is not None else None

    def get_active_policy(self) -> Policy | None:
        with self._lock:
            policy = self._state.active_policy()
            return replace(policy) if policy is not None else None

    def get_policy_history(self, policy_id: int) -> PolicyHistory | None:
        with self._lock:
            history = self._state.history.get(policy_id)
            if history is None:
                return None
            return PolicyHistory(updates=list(history.updates))

    def get_policy_count(self) -> int:
        """Number of policies ever created, active or not."""
        with self._lock:
            return self._state.next_policy_id

    def is_policy_active(self, policy_id: int) -> bool:
        with self._lock:
            policy = self._state.policies.get(policy_id)
            return policy.is_active if policy is not None else False

    def list_policies(self) -> list[Policy]:
        """Copies of all stored policies in id order."""
        with self._lock:
            return [replace(self._state.policies[pid]) for pid in sorted(self._state.policies)]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @property
    def events(self) -> list[Event]:
        with self._lock:
            return list(self._events)

    def drain_events(self) -> list[Event]:
        """Return recorded events in order and clear the buffer."""
        with self._lock:
            events, self._events = self._events, []
            return events

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_authorized(self, ctx: CallContext) -> ErrorCode | None:
        oracle = self._state.authorization_oracle
        if oracle is None:
            return ErrorCode.AUTHORIZATION_NOT_CONFIGURED
        if ctx.caller != oracle:
            return ErrorCode.NOT_AUTHORIZED
        return None

    def _reject(self, operation: str, code: ErrorCode) -> Result[Any]:
        logger.debug("%s rejected: %s (%d)", operation, code.name, code)
        return Result.failure(code)

    def _record(self, event_type: str, subject: str, data: dict, ctx: CallContext) -> None:
        self._events.append(
            Event(
                event_id=str(uuid.uuid4()),
                event_type=event_type,
                event_time=datetime.now(timezone.utc),
                source=EVENT_SOURCE,
                subject=subject,
                data=data,
                metadata={"height": ctx.height, "caller": ctx.caller},
            )
        )
