"""
TIP-712 (EIP-712 compatible) descriptors for GasFree PermitTransfer authorizations.

The SDK does not sign. Callers sign a PermitTransfer message against the
domain and types below with their own wallet or signer.
"""

import copy
from typing import Any, Dict, List

from gasfree.utils.address import tron_address_to_evm

GASFREE_DOMAIN_NAME = "GasFreeController"
GASFREE_DOMAIN_VERSION = "V1.0.0"
PERMIT_TRANSFER_PRIMARY_TYPE = "PermitTransfer"

# GasFree EIP-712 Domain Definition
GASFREE_DOMAIN_TYPE: List[Dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# GasFree TIP-712 Message Types
PERMIT_TRANSFER_TYPE: List[Dict[str, str]] = [
    {"name": "token", "type": "address"},
    {"name": "serviceProvider", "type": "address"},
    {"name": "user", "type": "address"},
    {"name": "receiver", "type": "address"},
    {"name": "value", "type": "uint256"},
    {"name": "maxFee", "type": "uint256"},
    {"name": "deadline", "type": "uint256"},
    {"name": "version", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
]

GASFREE_TYPES: Dict[str, List[Dict[str, str]]] = {
    "EIP712Domain": GASFREE_DOMAIN_TYPE,
    PERMIT_TRANSFER_PRIMARY_TYPE: PERMIT_TRANSFER_TYPE,
}


def get_gasfree_domain(
    chain_id: int, verifying_contract: str, evm_format: bool = False
) -> Dict[str, Any]:
    """Get GasFree TIP-712 domain

    Args:
        chain_id: TRON chain ID
        verifying_contract: GasFreeController address (Base58)
        evm_format: Return the contract as 0x-hex, as EVM typed-data signers expect

    Returns:
        Domain dict with name, version, chainId and verifyingContract
    """
    return {
        "name": GASFREE_DOMAIN_NAME,
        "version": GASFREE_DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": (
            tron_address_to_evm(verifying_contract) if evm_format else verifying_contract
        ),
    }


def get_gasfree_types(include_domain: bool = False) -> Dict[str, List[Dict[str, str]]]:
    """Get a copy of the PermitTransfer type descriptor"""
    if include_domain:
        return copy.deepcopy(GASFREE_TYPES)
    return {PERMIT_TRANSFER_PRIMARY_TYPE: copy.deepcopy(PERMIT_TRANSFER_TYPE)}
