"""In-memory registry state."""

from dataclasses import dataclass, field

from lending_policy.config import DEFAULT_MAX_POLICIES
from lending_policy.models.policy import Policy, PolicyHistory


@dataclass
class RegistryState:
    """Mutable state owned by a single PolicyRegistry."""

    max_policies: int = DEFAULT_MAX_POLICIES
    next_policy_id: int = 0
    authorization_oracle: str | None = None
    active_policy_id: int | None = None

    policies: dict[int, Policy] = field(default_factory=dict)
    history: dict[int, PolicyHistory] = field(default_factory=dict)

    @property
    def at_capacity(self) -> bool:
        """True once no further policy ids can be allocated."""
        return self.next_policy_id >= self.max_policies

    def active_policy(self) -> Policy | None:
        """Return the stored active policy, if any."""
        if self.active_policy_id is None:
            return None
        return self.policies.get(self.active_policy_id)
