"""Per-module validation profiles and the context passed to validators.

A module declares which grammar its tasks accept through a profile instead of
being special-cased by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

SIGNET_ADDRESS_PREFIXES = ("tb1", "2", "m", "n")
LIGHTNING_INVOICE_PREFIX = "lnbc"


class ValidationProfile(BaseModel):
    """Accepted grammar for the tasks of one module."""

    model_config = ConfigDict(frozen=True)

    name: str
    txid_min_length: int = 64
    txid_max_length: int = 64
    address_prefixes: tuple[str, ...] = SIGNET_ADDRESS_PREFIXES
    allow_zero_amount: bool = False
    remote_lookup: bool = True

    @property
    def fixed_txid_length(self) -> bool:
        return self.txid_min_length == self.txid_max_length


SIGNET_PROFILE = ValidationProfile(name="signet")

# Payment hashes and preimages are not indexed on-chain, so no explorer lookup.
LIGHTNING_PROFILE = ValidationProfile(
    name="lightning",
    txid_min_length=16,
    txid_max_length=64,
    address_prefixes=(*SIGNET_ADDRESS_PREFIXES, LIGHTNING_INVOICE_PREFIX),
    allow_zero_amount=True,
    remote_lookup=False,
)


@dataclass(frozen=True)
class ValidationContext:
    """What a validator may know besides the raw input."""

    module_id: int | None = None
    profile: ValidationProfile = SIGNET_PROFILE
    fee_field: bool = False
    previous_values: dict[str, Any] = field(default_factory=dict)

    @property
    def allow_zero_amount(self) -> bool:
        return self.fee_field or self.profile.allow_zero_amount
