"""Validation failure taxonomy."""

from __future__ import annotations


class FormatError(ValueError):
    """Input shape is wrong. Always detected locally, always rejects the submission."""


class NetworkAdvisory(Exception):
    """The advisory explorer lookup failed or timed out. Never rejects a submission."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
