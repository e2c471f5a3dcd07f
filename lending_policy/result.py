"""Error taxonomy and result values returned by registry operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Generic, TypeVar

from lending_policy.exceptions import PolicyRejectedError

T = TypeVar("T")


class ErrorCode(IntEnum):
    """Numeric rejection codes.

    ``INVALID_POLICY_ID``, ``INVALID_APPROVAL_HEIGHT``, ``POLICY_ALREADY_EXISTS``,
    ``INVALID_MEMBER_STATUS`` and ``INVALID_UPDATE_PARAM`` are reserved and not
    produced by any registry operation.
    """

    NOT_AUTHORIZED = 401
    INVALID_POLICY_ID = 402
    INVALID_INTEREST_RATE = 403
    INVALID_MAX_LOAN = 404
    INVALID_MIN_COLLATERAL = 405
    INVALID_PROPOSER = 406
    INVALID_APPROVAL_HEIGHT = 407
    POLICY_ALREADY_EXISTS = 408
    NO_ACTIVE_POLICY = 409
    INVALID_LOAN_AMOUNT = 410
    INSUFFICIENT_COLLATERAL = 411
    LOAN_NOT_ALLOWED = 412
    INVALID_REPAYMENT_TERM = 413
    INVALID_CREDIT_SCORE = 414
    INVALID_MEMBER_STATUS = 415
    POLICY_NOT_FOUND = 416
    INVALID_UPDATE_PARAM = 417
    MAX_POLICIES_EXCEEDED = 418
    INVALID_POLICY_TYPE = 419
    INVALID_GRACE_PERIOD = 420
    INVALID_PENALTY_RATE = 421
    INVALID_CURRENCY = 422
    INVALID_LOCATION_RESTRICTION = 423
    INVALID_MIN_LOAN = 424
    INVALID_MAX_REPAYMENT = 425
    AUTHORIZATION_NOT_CONFIGURED = 426


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a registry operation.

    On success ``value`` holds the operation's return value; on failure it
    holds the :class:`ErrorCode` of the first failing check.
    """

    ok: bool
    value: Any

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, code: ErrorCode) -> "Result[T]":
        return cls(ok=False, value=code)

    @property
    def error(self) -> ErrorCode | None:
        """Error code of a failed result, None on success."""
        return None if self.ok else self.value

    def unwrap(self) -> T:
        """Return the success value.

        Raises
        ------
        PolicyRejectedError
            If the result is a failure.
        """
        if not self.ok:
            raise PolicyRejectedError(self.value)
        return self.value
