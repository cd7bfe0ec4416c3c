"""Validation service: local format check first, then an optional advisory explorer lookup."""

from __future__ import annotations

import logging

from satslab.explorer.client import ExplorerClient, summarize_address, summarize_transaction
from satslab.validation.errors import FormatError, NetworkAdvisory
from satslab.validation.formats import check_format
from satslab.validation.profiles import ValidationContext
from satslab.validation.result import ValidationKind, ValidationResult, Verdict

logger = logging.getLogger(__name__)

_REMOTE_KINDS = (ValidationKind.TRANSACTION, ValidationKind.ADDRESS)


class ValidationService:
    """Validates task submissions.

    The explorer is optional. Without it, or when the lookup fails, well-formed
    transaction and address input is still accepted as UNVERIFIED.
    """

    def __init__(self, explorer: ExplorerClient | None = None) -> None:
        self.explorer = explorer

    async def validate(
        self,
        kind: ValidationKind | str,
        raw_input: str,
        context: ValidationContext | None = None,
    ) -> ValidationResult:
        """Validate one submission. Never raises."""
        context = context or ValidationContext()
        try:
            kind = ValidationKind(kind)
        except ValueError:
            return ValidationResult.rejected(f"Unsupported validation type: {kind}")

        try:
            value = check_format(kind, raw_input, context)
        except FormatError as e:
            return ValidationResult.rejected(str(e))

        if kind is ValidationKind.AMOUNT:
            return ValidationResult(Verdict.CONFIRMED, f"Valid amount: {value:g} sBTC", value=value)
        if kind is ValidationKind.CUSTOM:
            return ValidationResult(Verdict.CONFIRMED, "Answer accepted!", value=value)

        if self.explorer is None or not context.profile.remote_lookup:
            return self._format_accepted(kind, value)

        try:
            if kind is ValidationKind.TRANSACTION:
                record = await self.explorer.get_transaction(str(value))
                message = f"Transaction found! {summarize_transaction(record)}."
            else:
                record = await self.explorer.get_address(str(value))
                message = f"Valid address! {summarize_address(record)}."
        except NetworkAdvisory as e:
            logger.info("Advisory lookup failed for %s: %s", kind.value, e)
            return self._format_accepted(kind, value)
        except Exception:
            logger.warning("Unexpected error during advisory lookup", exc_info=True)
            return self._format_accepted(kind, value)

        return ValidationResult(Verdict.CONFIRMED, message, value=value, data=record)

    @staticmethod
    def _format_accepted(kind: ValidationKind, value: object) -> ValidationResult:
        noun = "Transaction hash" if kind is ValidationKind.TRANSACTION else "Address"
        return ValidationResult(Verdict.UNVERIFIED, f"{noun} format accepted.", value=value)
