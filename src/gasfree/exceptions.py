"""
GasFree SDK exception hierarchy
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from gasfree.types import ApiResponse


class ErrorKind(str, Enum):
    """Coarse error category, one per branch of the exception tree"""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    RESPONSE_PARSE = "response_parse"
    API = "api"
    CONFIGURATION = "configuration"


class ErrorReason(str, Enum):
    """Symbolic error reasons reported by the GasFree relay"""

    PROVIDER_ADDRESS_NOT_MATCH = "ProviderAddressNotMatchException"
    DEADLINE_EXCEEDED = "DeadlineExceededException"
    INVALID_SIGNATURE = "InvalidSignatureException"
    UNSUPPORTED_TOKEN = "UnsupportedTokenException"
    TOO_MANY_PENDING_TRANSFER = "TooManyPendingTransferException"
    VERSION_NOT_SUPPORTED = "VersionNotSupportedException"
    NONCE_NOT_MATCH = "NonceNotMatchException"
    MAX_FEE_EXCEEDED = "MaxFeeExceededException"
    INSUFFICIENT_BALANCE = "InsufficientBalanceException"

    @classmethod
    def lookup(cls, value: Any) -> "ErrorReason | None":
        """Return the matching reason, or None if the value is not a known reason"""
        try:
            return cls(value)
        except ValueError:
            return None


class GasFreeError(Exception):
    """GasFree SDK base exception"""

    kind: ErrorKind


class ValidationError(GasFreeError):
    """Caller input rejected locally, before any request is sent"""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class ExpiredDeadlineError(ValidationError):
    """Transfer deadline is not in the future"""

    def __init__(self, deadline: int, now: int):
        self.deadline = deadline
        self.now = now
        super().__init__(
            f"Deadline must be in the future (deadline={deadline}, now={now})", field="deadline"
        )


class TransportError(GasFreeError):
    """HTTP request failed before a response was received"""

    kind = ErrorKind.TRANSPORT


class ResponseParseError(GasFreeError):
    """Response body is not a JSON response envelope"""

    kind = ErrorKind.RESPONSE_PARSE

    def __init__(self, status_code: int, body: str, detail: str = "Failed to parse API response"):
        self.status_code = status_code
        self.body = body
        super().__init__(f"{detail} (HTTP {status_code})")


class ConfigurationError(GasFreeError):
    """Invalid client configuration"""

    kind = ErrorKind.CONFIGURATION


class ApiError(GasFreeError):
    """GasFree relay rejected the request"""

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        code: int | None = None,
        reason: ErrorReason | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.code = code
        self.reason = reason
        self.status_code = status_code
        if reason is not None:
            text = f"API request failed: {reason.value}: {message}"
        else:
            text = f"API request failed: {message} (Code: {code})"
        super().__init__(text)

    @classmethod
    def from_response(cls, status_code: int, envelope: "ApiResponse") -> "ApiError":
        """Build the most specific ApiError for an error envelope"""
        message = envelope.message_text()
        code = envelope.code_or(status_code)
        reason = ErrorReason.lookup(envelope.reason)
        if reason is None:
            return ApiError(message, code=code, status_code=status_code)
        error_cls = _REASON_ERRORS[reason]
        return error_cls(message, code=code, reason=reason, status_code=status_code)


class ProviderAddressNotMatchError(ApiError):
    """Service provider is not the one registered for the token"""

    pass


class DeadlineExceededError(ApiError):
    """Relay considers the authorization expired"""

    pass


class InvalidSignatureError(ApiError):
    """Authorization signature (or API signature) did not verify"""

    pass


class UnsupportedTokenError(ApiError):
    """Token is not supported by the relay"""

    pass


class TooManyPendingTransferError(ApiError):
    """Account has too many transfers in flight"""

    pass


class VersionNotSupportedError(ApiError):
    """Authorization version is not supported"""

    pass


class NonceNotMatchError(ApiError):
    """Nonce differs from the account's current nonce"""

    pass


class MaxFeeExceededError(ApiError):
    """Required fee is higher than the authorized maxFee"""

    pass


class InsufficientBalanceError(ApiError):
    """GasFree account cannot cover value plus fee"""

    pass


_REASON_ERRORS: dict[ErrorReason, type[ApiError]] = {
    ErrorReason.PROVIDER_ADDRESS_NOT_MATCH: ProviderAddressNotMatchError,
    ErrorReason.DEADLINE_EXCEEDED: DeadlineExceededError,
    ErrorReason.INVALID_SIGNATURE: InvalidSignatureError,
    ErrorReason.UNSUPPORTED_TOKEN: UnsupportedTokenError,
    ErrorReason.TOO_MANY_PENDING_TRANSFER: TooManyPendingTransferError,
    ErrorReason.VERSION_NOT_SUPPORTED: VersionNotSupportedError,
    ErrorReason.NONCE_NOT_MATCH: NonceNotMatchError,
    ErrorReason.MAX_FEE_EXCEEDED: MaxFeeExceededError,
    ErrorReason.INSUFFICIENT_BALANCE: InsufficientBalanceError,
}
