"""
Local format checks for task submissions.

Every check is a pure function of the input and the validation context: it
returns the normalized value or raises FormatError with a message the learner
can act on. No network access happens here.
"""

from __future__ import annotations

import math
import re

from satslab.validation.errors import FormatError
from satslab.validation.profiles import LIGHTNING_INVOICE_PREFIX, ValidationContext
from satslab.validation.result import ValidationKind

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

BECH32_MIN_LENGTH = 42  # tb1q + 20-byte program
BECH32_MAX_LENGTH = 62  # tb1q/tb1p + 32-byte program
BASE58_MIN_LENGTH = 26
BASE58_MAX_LENGTH = 35
INVOICE_MIN_LENGTH = 12

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INVOICE_RE = re.compile(r"^[0-9a-z]+$")


def check_transaction_id(raw: str, context: ValidationContext) -> str:
    """Validate a transaction hash (or a Lightning payment hash under a Lightning profile)."""
    txid = raw.strip()
    profile = context.profile
    if profile.fixed_txid_length:
        expected = f"exactly {profile.txid_max_length} hexadecimal characters"
    else:
        expected = f"between {profile.txid_min_length} and {profile.txid_max_length} hexadecimal characters"

    if not _HEX_RE.match(txid):
        msg = f"Invalid format. The hash must contain only hexadecimal characters (0-9, a-f), {expected}."
        raise FormatError(msg)
    if not profile.txid_min_length <= len(txid) <= profile.txid_max_length:
        msg = f"Invalid format. The hash must have {expected}; got {len(txid)}."
        raise FormatError(msg)
    return txid.lower()


def check_address(raw: str, context: ValidationContext) -> str:
    """Validate an address or Lightning invoice against the profile's accepted prefixes."""
    address = raw.strip()
    prefixes = context.profile.address_prefixes

    lowered = address.lower()
    if lowered.startswith("tb1") and "tb1" in prefixes:
        return _check_bech32(address)
    if lowered.startswith(LIGHTNING_INVOICE_PREFIX) and LIGHTNING_INVOICE_PREFIX in prefixes:
        return _check_invoice(address)
    if address.startswith(("2", "m", "n")) and address[0] in prefixes:
        return _check_base58(address)

    accepted = ", ".join(prefixes)
    msg = f"The address must belong to the Signet network (starts with {accepted})."
    raise FormatError(msg)


def check_amount(raw: str, context: ValidationContext) -> float:
    """Parse a decimal amount. Fee-style fields accept zero, other fields require > 0."""
    text = raw.strip()
    if "," in text and _NUMBER_RE.match(text.replace(",", ".")):
        msg = "Use a decimal point, not a comma (0.05, not 0,05)."
        raise FormatError(msg)
    if not _NUMBER_RE.match(text):
        msg = "Please enter a valid numeric value."
        raise FormatError(msg)

    value = float(text)
    if not math.isfinite(value):
        msg = "Please enter a valid numeric value."
        raise FormatError(msg)

    if context.allow_zero_amount:
        if value < 0:
            msg = "Please enter a valid numeric value greater than or equal to 0."
            raise FormatError(msg)
    elif value <= 0:
        msg = "Please enter a valid numeric value greater than 0."
        raise FormatError(msg)
    return value


def check_custom(raw: str, _context: ValidationContext) -> str:
    """Presence check only."""
    answer = raw.strip()
    if not answer:
        msg = "Please provide an answer."
        raise FormatError(msg)
    return answer


_CHECKS = {
    ValidationKind.TRANSACTION: check_transaction_id,
    ValidationKind.ADDRESS: check_address,
    ValidationKind.AMOUNT: check_amount,
    ValidationKind.CUSTOM: check_custom,
}


def check_format(kind: ValidationKind | str, raw: str, context: ValidationContext) -> object:
    """Run the local check for a validation kind. Raises FormatError."""
    try:
        check = _CHECKS[ValidationKind(kind)]
    except ValueError as e:
        msg = f"Unsupported validation type: {kind}"
        raise FormatError(msg) from e
    return check(raw, context)


def _check_bech32(address: str) -> str:
    """Bech32 addresses are single-case; the data part uses the bech32 alphabet."""
    if address != address.lower() and address != address.upper():
        msg = "Invalid bech32 address: mixed upper and lower case."
        raise FormatError(msg)
    normalized = address.lower()
    if not BECH32_MIN_LENGTH <= len(normalized) <= BECH32_MAX_LENGTH:
        msg = (
            f"Invalid bech32 address length: expected {BECH32_MIN_LENGTH} to "
            f"{BECH32_MAX_LENGTH} characters, got {len(normalized)}."
        )
        raise FormatError(msg)
    data = normalized[len("tb1"):]
    bad = sorted({c for c in data if c not in BECH32_CHARSET})
    if bad:
        msg = f"Invalid bech32 address: characters {''.join(bad)!r} are not allowed."
        raise FormatError(msg)
    return normalized


def _check_base58(address: str) -> str:
    if not BASE58_MIN_LENGTH <= len(address) <= BASE58_MAX_LENGTH:
        msg = (
            f"Invalid legacy address length: expected {BASE58_MIN_LENGTH} to "
            f"{BASE58_MAX_LENGTH} characters, got {len(address)}."
        )
        raise FormatError(msg)
    bad = sorted({c for c in address if c not in BASE58_ALPHABET})
    if bad:
        msg = f"Invalid legacy address: characters {''.join(bad)!r} are not allowed."
        raise FormatError(msg)
    return address


def _check_invoice(invoice: str) -> str:
    normalized = invoice.lower()
    if len(normalized) < INVOICE_MIN_LENGTH or not _INVOICE_RE.match(normalized):
        msg = "Invalid Lightning invoice. It must start with 'lnbc' followed by letters and digits."
        raise FormatError(msg)
    return normalized
