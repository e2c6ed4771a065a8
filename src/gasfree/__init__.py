"""
GasFree SDK - client for gas-free TRC-20 transfers through the GasFree relay
"""

from gasfree.client import AsyncGasFreeClient, GasFreeClient
from gasfree.config import ClientConfig, Network, NetworkConfig, NetworkProfile
from gasfree.eip712 import (
    GASFREE_DOMAIN_NAME,
    GASFREE_DOMAIN_VERSION,
    GASFREE_TYPES,
    get_gasfree_domain,
    get_gasfree_types,
)
from gasfree.exceptions import (
    ApiError,
    ConfigurationError,
    DeadlineExceededError,
    ErrorKind,
    ErrorReason,
    ExpiredDeadlineError,
    GasFreeError,
    InsufficientBalanceError,
    InvalidSignatureError,
    MaxFeeExceededError,
    NonceNotMatchError,
    ProviderAddressNotMatchError,
    ResponseParseError,
    TooManyPendingTransferError,
    TransportError,
    UnsupportedTokenError,
    ValidationError,
    VersionNotSupportedError,
)
from gasfree.signing import build_headers, build_message, generate_signature
from gasfree.types import ApiResponse, PermitTransfer, SignedPermitTransfer
from gasfree.utils.address import is_tron_address, is_valid_tron_address
from gasfree.validation import validate_address, validate_trace_id, validate_transfer

__version__ = "1.0.0"

__all__ = [
    # Clients
    "GasFreeClient",
    "AsyncGasFreeClient",
    # Configuration
    "ClientConfig",
    "Network",
    "NetworkConfig",
    "NetworkProfile",
    # Signing
    "build_message",
    "generate_signature",
    "build_headers",
    # TIP-712 descriptors
    "GASFREE_DOMAIN_NAME",
    "GASFREE_DOMAIN_VERSION",
    "GASFREE_TYPES",
    "get_gasfree_domain",
    "get_gasfree_types",
    # Types
    "ApiResponse",
    "PermitTransfer",
    "SignedPermitTransfer",
    # Validation
    "is_tron_address",
    "is_valid_tron_address",
    "validate_address",
    "validate_transfer",
    "validate_trace_id",
    # Errors
    "GasFreeError",
    "ErrorKind",
    "ErrorReason",
    "ValidationError",
    "ExpiredDeadlineError",
    "TransportError",
    "ResponseParseError",
    "ConfigurationError",
    "ApiError",
    "ProviderAddressNotMatchError",
    "DeadlineExceededError",
    "InvalidSignatureError",
    "UnsupportedTokenError",
    "TooManyPendingTransferError",
    "VersionNotSupportedError",
    "NonceNotMatchError",
    "MaxFeeExceededError",
    "InsufficientBalanceError",
]
