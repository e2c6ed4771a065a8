"""
Type definitions for the GasFree relay API
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiResponse(BaseModel):
    """Response envelope returned by every GasFree endpoint

    Fields are read as-is; error payloads are not guaranteed to be well typed.
    """

    model_config = ConfigDict(extra="ignore")

    code: Any = None
    message: Any = None
    reason: Any = None
    data: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> "ApiResponse":
        """Wrap decoded JSON; anything but an object is an envelope without fields"""
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)

    def code_or(self, default: int) -> int:
        """Numeric code, or default when absent or not an integer"""
        if isinstance(self.code, int) and not isinstance(self.code, bool):
            return self.code
        if isinstance(self.code, str) and self.code.strip().isdigit():
            return int(self.code)
        return default

    def message_text(self) -> str:
        """Message as a string; lists of messages are joined"""
        if self.message is None or self.message == "":
            return "Unknown error"
        if isinstance(self.message, str):
            return self.message
        if isinstance(self.message, list):
            return "; ".join(str(item) for item in self.message)
        return str(self.message)


class PermitTransfer(BaseModel):
    """PermitTransfer message signed by the user (TIP-712)"""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    service_provider: str = Field(alias="serviceProvider")
    user: str
    receiver: str
    value: int
    max_fee: int = Field(alias="maxFee")
    deadline: int
    version: int = 1
    nonce: int

    def to_message(self) -> dict[str, Any]:
        """Message dict for typed-data signing"""
        return self.model_dump(by_alias=True)

    def with_signature(self, sig: str) -> "SignedPermitTransfer":
        """Attach the user's signature; a leading 0x is stripped"""
        sig = sig[2:] if sig.startswith("0x") else sig
        return SignedPermitTransfer(**self.model_dump(by_alias=True), sig=sig)


class SignedPermitTransfer(PermitTransfer):
    """PermitTransfer plus signature, as accepted by POST /api/v1/gasfree/submit"""

    sig: str

    def to_payload(self) -> dict[str, Any]:
        """Submit request body"""
        return self.model_dump(by_alias=True)
