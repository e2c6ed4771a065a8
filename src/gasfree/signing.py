"""
HMAC request signing for the GasFree relay API.

Every request carries three headers:

    Timestamp: <unix seconds>
    Authorization: ApiKey <api key>:<signature>
    Content-Type: application/json

where the signature is base64(HMAC-SHA256(api secret, METHOD + path + timestamp)).
The path is the request path as sent on the wire, without host or query string.
That includes the relay URL's prefix (/tron or /nile), so the signed path is
e.g. /nile/api/v1/config/token/all, not the bare /api/v1/... path that older
SDKs for this relay sign.
The relay recomputes the same message, so any difference in method casing,
path or timestamp formatting makes the request fail authentication.
"""

import base64
import hashlib
import hmac
import time
from typing import Dict

AUTHORIZATION_SCHEME = "ApiKey"


def build_message(method: str, path: str, timestamp: int) -> str:
    """Canonical message: uppercase method, path and decimal timestamp, no separators"""
    return f"{method.upper()}{path}{int(timestamp)}"


def generate_signature(api_secret: str, method: str, path: str, timestamp: int) -> str:
    """Generate the base64 encoded HMAC-SHA256 signature of a request"""
    message = build_message(method, path, timestamp)
    digest = hmac.new(
        api_secret.encode("utf-8"), message.encode("utf-8"), digestmod=hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode("utf-8")


def build_headers(
    api_key: str,
    api_secret: str,
    method: str,
    path: str,
    timestamp: int | None = None,
) -> Dict[str, str]:
    """Generate headers with authentication

    Args:
        api_key: GasFree API key
        api_secret: GasFree API secret
        method: HTTP method
        path: Request path including any base URL prefix (e.g. /nile/api/v1/...)
        timestamp: Unix time in seconds, defaults to now

    Returns:
        Header dict for the request
    """
    if timestamp is None:
        timestamp = int(time.time())
    signature = generate_signature(api_secret, method, path, timestamp)
    return {
        "Timestamp": str(int(timestamp)),
        "Authorization": f"{AUTHORIZATION_SCHEME} {api_key}:{signature}",
        "Content-Type": "application/json",
    }
