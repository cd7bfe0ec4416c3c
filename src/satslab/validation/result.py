"""Validation kinds, verdicts and results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValidationKind(str, Enum):
    TRANSACTION = "transaction"
    ADDRESS = "address"
    AMOUNT = "amount"
    CUSTOM = "custom"


class Verdict(str, Enum):
    """Outcome of a validation.

    CONFIRMED: format accepted and, where a remote check applies, the explorer knows the value.
    UNVERIFIED: format accepted but the advisory lookup was skipped, failed or timed out.
    REJECTED: format error.
    """

    CONFIRMED = "confirmed"
    UNVERIFIED = "unverified"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ValidationResult:
    verdict: Verdict
    message: str
    value: Any = None
    data: dict[str, Any] | None = None

    @property
    def success(self) -> bool:
        return self.verdict is not Verdict.REJECTED

    @classmethod
    def rejected(cls, message: str) -> ValidationResult:
        return cls(verdict=Verdict.REJECTED, message=message)

    @classmethod
    def restored(cls) -> ValidationResult:
        return cls(verdict=Verdict.CONFIRMED, message="Completed in a previous session.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "verdict": self.verdict.value,
            "message": self.message,
            "value": self.value,
            "data": self.data,
        }
