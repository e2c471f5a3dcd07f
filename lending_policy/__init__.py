"""Lending policy registry for a decentralized lending protocol."""

from lending_policy.registry import CallContext, PolicyRegistry
from lending_policy.result import ErrorCode, Result

__version__ = "0.1.0"

__all__ = ["CallContext", "ErrorCode", "PolicyRegistry", "Result", "__version__"]
