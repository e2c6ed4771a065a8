"""
GasFree Utility Functions
"""

from gasfree.utils.address import is_tron_address, is_valid_tron_address, tron_address_to_evm

__all__ = [
    "is_tron_address",
    "is_valid_tron_address",
    "tron_address_to_evm",
]
