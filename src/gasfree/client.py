"""
GasFreeClient - HMAC-authenticated client for the GasFree relay API.

Two flavours share one request/response contract:

- GasFreeClient: blocking, backed by httpx.Client
- AsyncGasFreeClient: non-blocking, backed by httpx.AsyncClient

Each public call validates its input, sends exactly one signed request and
returns the envelope's ``data``. No retries, no polling.
"""

import logging
from typing import Any, Dict, List, Mapping
from urllib.parse import quote

import httpx

from gasfree.config import DEFAULT_TIMEOUT, ClientConfig, Network
from gasfree.eip712 import get_gasfree_domain, get_gasfree_types
from gasfree.exceptions import ApiError, ResponseParseError, TransportError
from gasfree.signing import build_headers
from gasfree.types import ApiResponse, SignedPermitTransfer
from gasfree.validation import validate_address, validate_trace_id, validate_transfer

logger = logging.getLogger(__name__)

TOKENS_PATH = "/api/v1/config/token/all"
PROVIDERS_PATH = "/api/v1/config/provider/all"
ADDRESS_PATH = "/api/v1/address/{address}"
SUBMIT_PATH = "/api/v1/gasfree/submit"
TRANSFER_PATH = "/api/v1/gasfree/{trace_id}"

TransferParams = Mapping[str, Any] | SignedPermitTransfer


class _BaseGasFreeClient:
    """Configuration, request preparation and response handling shared by both clients"""

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        is_testnet: bool = False,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str | None = None,
    ) -> None:
        """
        Initialize GasFree client.

        Args:
            api_key: GasFree API key
            api_secret: GasFree API secret
            is_testnet: Use the Nile testnet deployment instead of mainnet
            timeout: Request timeout in seconds
            base_url: Override for the relay URL (its path prefix is still signed)
        """
        self._config = ClientConfig(
            api_key=api_key,
            api_secret=api_secret,
            network=Network.TESTNET if is_testnet else Network.MAINNET,
            timeout=timeout,
            base_url=base_url,
        )
        self._base_url = self._config.resolved_base_url
        # Path prefix of the relay URL, e.g. "/nile"; part of the signed path
        self._path_prefix = httpx.URL(self._base_url).path.rstrip("/")

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any):
        """Create a client from a ClientConfig"""
        return cls(
            config.api_key,
            config.api_secret,
            config.is_testnet,
            timeout=config.timeout,
            base_url=config.base_url,
            **kwargs,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def network(self) -> Network:
        return self._config.network

    @property
    def base_url(self) -> str:
        return self._base_url

    def get_chain_id(self) -> int:
        return self._config.profile.chain_id

    def get_verifying_contract(self) -> str:
        return self._config.profile.verifying_contract

    def get_message_domain(self, evm_format: bool = False) -> Dict[str, Any]:
        """TIP-712 domain for signing a PermitTransfer on this network"""
        return get_gasfree_domain(self.get_chain_id(), self.get_verifying_contract(), evm_format)

    def get_message_types(self) -> Dict[str, List[Dict[str, str]]]:
        """TIP-712 type descriptor of PermitTransfer"""
        return get_gasfree_types()

    def _prepare_request(
        self, method: str, path: str, body: Mapping[str, Any] | None = None
    ) -> Dict[str, Any]:
        """Build keyword arguments for httpx request()"""
        method = method.upper()
        request: Dict[str, Any] = {
            "method": method,
            "url": f"{self._base_url}{path}",
            "headers": build_headers(
                self._config.api_key,
                self._config.api_secret,
                method,
                f"{self._path_prefix}{path}",
            ),
        }
        if method == "POST" and body is not None:
            request["json"] = dict(body)
        logger.debug(f"GasFree request {method} {path}")
        return request

    def _transport_error(self, method: str, path: str, error: httpx.TransportError):
        logger.error(f"GasFree request {method} {path} failed: {error!r}")
        return TransportError(f"GasFree request {method} {path} failed: {error}")

    def _handle_response(self, response: httpx.Response) -> Any:
        """Decode the response envelope and return its data"""
        status_code = response.status_code
        try:
            payload = response.json()
        except ValueError as e:
            # json.JSONDecodeError, or UnicodeDecodeError for undecodable bodies
            logger.error(f"GasFree API returned unparseable body (HTTP {status_code}): {e}")
            raise ResponseParseError(status_code, response.text) from e
        envelope = ApiResponse.from_payload(payload)

        if status_code != 200:
            error = ApiError.from_response(status_code, envelope)
            logger.warning(
                f"GasFree API error {status_code}: reason={envelope.reason} "
                f"code={error.code} message={error.message}"
            )
            raise error

        return envelope.data if envelope.data is not None else {}

    @staticmethod
    def _transfer_path(trace_id: str) -> str:
        # Encoded once so the signed path is byte-identical to the path on the wire
        return TRANSFER_PATH.format(trace_id=quote(trace_id, safe=""))

    @staticmethod
    def _transfer_body(params: TransferParams) -> Mapping[str, Any]:
        if isinstance(params, SignedPermitTransfer):
            return params.to_payload()
        return params


class GasFreeClient(_BaseGasFreeClient):
    """
    Blocking GasFree API client.

    Usage:
        with GasFreeClient(api_key, api_secret, is_testnet=True) as client:
            tokens = client.get_all_tokens()
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        is_testnet: bool = False,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(api_key, api_secret, is_testnet, timeout=timeout, base_url=base_url)
        self._http_client = http_client
        self._owns_http_client = http_client is None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.Client(timeout=self._config.timeout)
        return self._http_client

    def close(self) -> None:
        """Close HTTP client"""
        if self._http_client is not None and self._owns_http_client:
            self._http_client.close()
            self._http_client = None

    def __enter__(self) -> "GasFreeClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, body: Mapping[str, Any] | None = None) -> Any:
        request = self._prepare_request(method, path, body)
        try:
            response = self._get_client().request(**request)
        except httpx.TransportError as e:
            raise self._transport_error(request["method"], path, e) from e
        return self._handle_response(response)

    def get_all_tokens(self) -> Any:
        """Get all tokens supported by the relay"""
        return self._request("GET", TOKENS_PATH)

    def get_all_providers(self) -> Any:
        """Get all service providers"""
        return self._request("GET", PROVIDERS_PATH)

    def get_account_info(self, address: str) -> Any:
        """Get GasFree account info (activation, GasFree address, balances, nonce)

        Raises:
            ValidationError: If the address is not a TRON address
        """
        validate_address(address)
        return self._request("GET", ADDRESS_PATH.format(address=address))

    def submit_transfer(self, params: TransferParams) -> Any:
        """Submit a signed PermitTransfer authorization

        Args:
            params: token, serviceProvider, user, receiver, value, maxFee,
                deadline, version, nonce and sig. Forwarded unchanged.

        Returns:
            Transfer record, including its trace ID

        Raises:
            ValidationError: If a field is missing or malformed
            ExpiredDeadlineError: If the deadline has passed
        """
        body = self._transfer_body(params)
        validate_transfer(body)
        return self._request("POST", SUBMIT_PATH, body)

    def get_transfer_details(self, trace_id: str) -> Any:
        """Get state of a submitted transfer"""
        validate_trace_id(trace_id)
        return self._request("GET", self._transfer_path(trace_id))


class AsyncGasFreeClient(_BaseGasFreeClient):
    """
    Non-blocking GasFree API client, same surface as GasFreeClient.

    Usage:
        async with AsyncGasFreeClient(api_key, api_secret) as client:
            details = await client.get_transfer_details(trace_id)
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        is_testnet: bool = False,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(api_key, api_secret, is_testnet, timeout=timeout, base_url=base_url)
        self._http_client = http_client
        self._owns_http_client = http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client"""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._config.timeout)
        return self._http_client

    async def aclose(self) -> None:
        """Close HTTP client"""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "AsyncGasFreeClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def _request(
        self, method: str, path: str, body: Mapping[str, Any] | None = None
    ) -> Any:
        request = self._prepare_request(method, path, body)
        client = await self._get_client()
        try:
            response = await client.request(**request)
        except httpx.TransportError as e:
            raise self._transport_error(request["method"], path, e) from e
        return self._handle_response(response)

    async def get_all_tokens(self) -> Any:
        """Get all tokens supported by the relay"""
        return await self._request("GET", TOKENS_PATH)

    async def get_all_providers(self) -> Any:
        """Get all service providers"""
        return await self._request("GET", PROVIDERS_PATH)

    async def get_account_info(self, address: str) -> Any:
        """Get GasFree account info (activation, GasFree address, balances, nonce)"""
        validate_address(address)
        return await self._request("GET", ADDRESS_PATH.format(address=address))

    async def submit_transfer(self, params: TransferParams) -> Any:
        """Submit a signed PermitTransfer authorization"""
        body = self._transfer_body(params)
        validate_transfer(body)
        return await self._request("POST", SUBMIT_PATH, body)

    async def get_transfer_details(self, trace_id: str) -> Any:
        """Get state of a submitted transfer"""
        validate_trace_id(trace_id)
        return await self._request("GET", self._transfer_path(trace_id))
