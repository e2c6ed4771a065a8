"""
Address utility functions for TRON address checks and EVM conversion
"""

import hashlib
import logging
import re

import base58

logger = logging.getLogger(__name__)

# Base58 alphabet excludes 0, O, I and l
TRON_ADDRESS_PATTERN = re.compile(r"^T[1-9A-HJ-NP-Za-km-z]{33}$")

TRON_ADDRESS_PREFIX = 0x41


def is_tron_address(address: object) -> bool:
    """Check that a value has the shape of a TRON Base58Check address.

    Only the shape is checked: leading "T", 34 characters, Base58 alphabet.
    The checksum is not verified, see is_valid_tron_address.
    """
    return isinstance(address, str) and TRON_ADDRESS_PATTERN.match(address) is not None


def is_valid_tron_address(address: object) -> bool:
    """Check shape, version byte and Base58Check checksum of a TRON address"""
    if not is_tron_address(address):
        return False
    try:
        decoded = base58.b58decode(address)
    except ValueError:
        return False
    # 1 byte version + 20 bytes address + 4 bytes checksum
    if len(decoded) != 25 or decoded[0] != TRON_ADDRESS_PREFIX:
        return False
    payload, checksum = decoded[:21], decoded[21:]
    return hashlib.sha256(hashlib.sha256(payload).digest()).digest()[:4] == checksum


def tron_address_to_evm(tron_addr: str) -> str:
    """Convert TRON Base58Check address to EVM hex format (0x...)

    Args:
        tron_addr: TRON address in Base58 format or TRON hex format (41...)

    Returns:
        EVM address in hex format (0x...)
    """
    if tron_addr.startswith("0x"):
        return tron_addr

    if tron_addr.startswith("41") and len(tron_addr) == 42:
        hex_body = tron_addr[2:]
        if all(c in "0123456789abcdefABCDEF" for c in hex_body):
            return "0x" + hex_body.lower()

    try:
        decoded = base58.b58decode_check(tron_addr)
    except ValueError as e:
        logger.warning(f"Failed to convert TRON address {tron_addr}: {e}, using as-is")
        return tron_addr
    # Skip the version byte, keep the 20-byte account id
    return "0x" + decoded[1:21].hex()
