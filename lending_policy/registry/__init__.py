"""Policy registry service and its state."""

from lending_policy.registry.policy_registry import CallContext, PolicyRegistry
from lending_policy.registry.state import RegistryState

__all__ = ["CallContext", "PolicyRegistry", "RegistryState"]
