"""Custom exception hierarchy for lending-policy."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lending_policy.result import ErrorCode


class LendingPolicyError(Exception):
    """Base exception for all lending-policy errors."""


class ConfigurationError(LendingPolicyError):
    """Raised when configuration is invalid or missing."""


class PolicyRejectedError(LendingPolicyError):
    """Raised when a failed registry result is unwrapped."""

    def __init__(self, code: "ErrorCode") -> None:
        self.code = code
        super().__init__(f"Rejected with {code.name} ({int(code)})")
