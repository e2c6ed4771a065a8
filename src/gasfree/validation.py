"""
Local validation of caller input. Failures raise before any request is sent.
"""

import time
from typing import Any, Mapping

from gasfree.exceptions import ExpiredDeadlineError, ValidationError
from gasfree.utils.address import is_tron_address, is_valid_tron_address

REQUIRED_TRANSFER_FIELDS = (
    "token",
    "serviceProvider",
    "user",
    "receiver",
    "value",
    "maxFee",
    "deadline",
    "version",
    "nonce",
    "sig",
)

ADDRESS_FIELDS = ("token", "serviceProvider", "user", "receiver")

POSITIVE_INTEGER_FIELDS = ("value", "maxFee", "deadline", "version", "nonce")


def validate_address(address: Any, field: str = "address", strict: bool = False) -> str:
    """Check a TRON address and return it unchanged

    Args:
        address: Candidate address
        field: Name used in the error message
        strict: Also verify the Base58Check checksum

    Raises:
        ValidationError: If the address is malformed
    """
    if not address:
        raise ValidationError(f"{field} cannot be empty", field=field)
    valid = is_valid_tron_address(address) if strict else is_tron_address(address)
    if not valid:
        raise ValidationError(f"Invalid TRON address for {field}: {address!r}", field=field)
    return address


def parse_positive_int(value: Any, field: str) -> int:
    """Parse an int or decimal digit string and require it to be > 0"""
    # bool is an int subclass, but True is not a meaningful amount
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be numeric, got {value!r}", field=field)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text[:1] in "+-" else text
        if not digits.isdigit() or not digits.isascii():
            raise ValidationError(f"{field} must be numeric, got {value!r}", field=field)
        number = int(text)
    else:
        raise ValidationError(f"{field} must be numeric, got {value!r}", field=field)
    if number <= 0:
        raise ValidationError(f"{field} must be a positive integer, got {value!r}", field=field)
    return number


def validate_transfer(
    params: Mapping[str, Any],
    now: int | None = None,
    strict_addresses: bool = False,
) -> None:
    """Validate a transfer authorization before submission

    Checks, in order: required fields present, address fields well formed,
    integer fields numeric and positive, deadline in the future.

    Raises:
        ValidationError: Naming the first offending field
        ExpiredDeadlineError: If deadline is not after now
    """
    if not isinstance(params, Mapping):
        raise ValidationError("Transfer parameters must be a mapping")

    for field in REQUIRED_TRANSFER_FIELDS:
        if params.get(field) is None:
            raise ValidationError(f"Missing required parameter: {field}", field=field)

    for field in ADDRESS_FIELDS:
        validate_address(params[field], field=field, strict=strict_addresses)

    numbers = {field: parse_positive_int(params[field], field) for field in POSITIVE_INTEGER_FIELDS}

    if not isinstance(params["sig"], str) or not params["sig"]:
        raise ValidationError("sig must be a non-empty string", field="sig")

    if now is None:
        now = int(time.time())
    if numbers["deadline"] <= now:
        raise ExpiredDeadlineError(numbers["deadline"], now)


def validate_trace_id(trace_id: Any) -> str:
    """Require a non-empty trace ID"""
    if not isinstance(trace_id, str) or not trace_id.strip():
        raise ValidationError("Trace ID cannot be empty", field="traceId")
    # Dot segments would be collapsed by URL normalisation after signing
    if trace_id in (".", ".."):
        raise ValidationError(f"Invalid trace ID: {trace_id!r}", field="traceId")
    return trace_id
