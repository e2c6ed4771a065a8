"""
Tests for the blocking GasFreeClient
"""

import json
from unittest.mock import patch

import httpx
import pytest
import respx

from gasfree.client import GasFreeClient
from gasfree.config import ClientConfig, Network
from gasfree.exceptions import (
    ApiError,
    ErrorKind,
    ErrorReason,
    ExpiredDeadlineError,
    InvalidSignatureError,
    ResponseParseError,
    TransportError,
    ValidationError,
)
from gasfree.signing import generate_signature
from gasfree.types import PermitTransfer

MAINNET_URL = "https://open.gasfree.io/tron"
TESTNET_URL = "https://open-test.gasfree.io/nile"
USER = "THQGuFzL87ZqhxkgqYEryRAd7gqFqL5rdc"


@pytest.fixture
def client(api_key, api_secret):
    with GasFreeClient(api_key, api_secret) as client:
        yield client


@pytest.fixture
def testnet_client(api_key, api_secret):
    with GasFreeClient(api_key, api_secret, is_testnet=True) as client:
        yield client


class TestAccessors:
    def test_mainnet(self, client):
        assert client.network is Network.MAINNET
        assert client.base_url == MAINNET_URL
        assert client.get_chain_id() == 728126428
        assert client.get_verifying_contract() == "TFFAMQLZybALaLb4uxHA9RBE7pxhUAjF3U"

    def test_testnet(self, testnet_client):
        assert testnet_client.base_url == TESTNET_URL
        assert testnet_client.get_chain_id() == 3448148188
        assert testnet_client.get_verifying_contract() == "THQGuFzL87ZqhxkgqYEryRAd7gqFqL5rdc"

    def test_message_domain(self, testnet_client):
        assert testnet_client.get_message_domain() == {
            "name": "GasFreeController",
            "version": "V1.0.0",
            "chainId": 3448148188,
            "verifyingContract": "THQGuFzL87ZqhxkgqYEryRAd7gqFqL5rdc",
        }
        assert testnet_client.get_message_domain(evm_format=True)["verifyingContract"].startswith(
            "0x"
        )

    def test_message_types(self, client):
        types = client.get_message_types()
        assert list(types) == ["PermitTransfer"]
        assert len(types["PermitTransfer"]) == 9

    def test_from_config(self):
        config = ClientConfig(api_key="k", api_secret="s", network=Network.TESTNET, timeout=3)
        client = GasFreeClient.from_config(config)
        assert client.config is not config
        assert client.config == config
        assert client.get_chain_id() == 3448148188


class TestRequestSigning:
    @respx.mock
    def test_get_sends_signed_headers(self, client):
        route = respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": {"tokens": []}})
        )
        with patch("time.time", return_value=1700000000):
            result = client.get_all_tokens()

        assert result == {"tokens": []}
        request = route.calls.last.request
        expected = generate_signature(
            "test-secret", "GET", "/tron/api/v1/config/token/all", 1700000000
        )
        assert request.headers["Timestamp"] == "1700000000"
        assert request.headers["Authorization"] == f"ApiKey test-key:{expected}"
        assert request.headers["Content-Type"] == "application/json"
        assert request.content == b""

    @respx.mock
    def test_testnet_signs_nile_prefix(self, testnet_client):
        route = respx.get(f"{TESTNET_URL}/api/v1/config/provider/all").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": {"providers": []}})
        )
        with patch("time.time", return_value=1700000000):
            testnet_client.get_all_providers()

        expected = generate_signature(
            "test-secret", "GET", "/nile/api/v1/config/provider/all", 1700000000
        )
        assert route.calls.last.request.headers["Authorization"].endswith(f":{expected}")

    @respx.mock
    def test_base_url_override_signs_its_path(self, api_key, api_secret):
        route = respx.get("http://relay.local/api/v1/config/token/all").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": []})
        )
        with GasFreeClient(api_key, api_secret, base_url="http://relay.local/") as client:
            with patch("time.time", return_value=5):
                assert client.get_all_tokens() == []

        expected = generate_signature("test-secret", "GET", "/api/v1/config/token/all", 5)
        assert route.calls.last.request.headers["Authorization"].endswith(f":{expected}")


class TestAccountInfo:
    @respx.mock
    def test_get_account_info(self, client):
        data = {"accountAddress": USER, "gasFreeAddress": "TGasFree", "active": True, "nonce": 5}
        route = respx.get(f"{MAINNET_URL}/api/v1/address/{USER}").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": data})
        )

        assert client.get_account_info(USER) == data
        assert route.called

    @pytest.mark.parametrize("address", ["", "invalid"])
    def test_invalid_address_sends_nothing(self, client, address):
        with respx.mock(assert_all_called=False) as router:
            route = router.route().mock(return_value=httpx.Response(200, json={}))
            with pytest.raises(ValidationError):
                client.get_account_info(address)
        assert not route.called

    @respx.mock
    def test_shape_only_address_passes_validation(self, client):
        address = "T" + "2" * 33
        respx.get(f"{MAINNET_URL}/api/v1/address/{address}").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": {"nonce": 0}})
        )
        assert client.get_account_info(address) == {"nonce": 0}


class TestSubmitTransfer:
    @respx.mock
    def test_posts_params_unchanged(self, client, transfer_params):
        route = respx.post(f"{MAINNET_URL}/api/v1/gasfree/submit").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": {"id": "trace-123"}})
        )
        with patch("time.time", return_value=1700000000):
            result = client.submit_transfer(transfer_params)

        assert result == {"id": "trace-123"}
        request = route.calls.last.request
        assert request.method == "POST"
        assert json.loads(request.content) == transfer_params
        expected = generate_signature(
            "test-secret", "POST", "/tron/api/v1/gasfree/submit", 1700000000
        )
        assert request.headers["Authorization"] == f"ApiKey test-key:{expected}"

    @respx.mock
    def test_accepts_signed_permit_model(self, client, transfer_params):
        route = respx.post(f"{MAINNET_URL}/api/v1/gasfree/submit").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": {"id": "trace-9"}})
        )
        permit = PermitTransfer(**{k: v for k, v in transfer_params.items() if k != "sig"})

        client.submit_transfer(permit.with_signature("0x" + transfer_params["sig"]))

        body = json.loads(route.calls.last.request.content)
        assert body["sig"] == transfer_params["sig"]
        assert body["value"] == 1000000

    @pytest.mark.parametrize("field", ["token", "deadline", "sig"])
    def test_missing_field_sends_nothing(self, client, transfer_params, field):
        del transfer_params[field]
        with respx.mock(assert_all_called=False) as router:
            route = router.route().mock(return_value=httpx.Response(200, json={}))
            with pytest.raises(ValidationError) as exc_info:
                client.submit_transfer(transfer_params)
        assert exc_info.value.field == field
        assert not route.called

    def test_expired_deadline(self, client, transfer_params):
        transfer_params["deadline"] = 1
        with respx.mock(assert_all_called=False) as router:
            route = router.route().mock(return_value=httpx.Response(200, json={}))
            with pytest.raises(ExpiredDeadlineError):
                client.submit_transfer(transfer_params)
        assert not route.called


class TestTransferDetails:
    @respx.mock
    def test_get_transfer_details(self, client):
        data = {"id": "trace-1", "state": "SUCCEED", "txnHash": "abc"}
        respx.get(f"{MAINNET_URL}/api/v1/gasfree/trace-1").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": data})
        )
        assert client.get_transfer_details("trace-1") == data

    def test_empty_trace_id(self, client):
        with pytest.raises(ValidationError):
            client.get_transfer_details("")

    @pytest.mark.parametrize("trace_id", ["a b", "abc?x=1", "x/../y", "t%2F1"])
    def test_signed_path_matches_path_on_the_wire(self, client, trace_id):
        with respx.mock as router:
            route = router.get(host="open.gasfree.io").mock(
                return_value=httpx.Response(200, json={"code": 200, "data": {"id": trace_id}})
            )
            with patch("time.time", return_value=1700000000):
                assert client.get_transfer_details(trace_id) == {"id": trace_id}

        request = route.calls.last.request
        assert request.url.query == b""
        raw_path = request.url.raw_path.decode("ascii")
        assert raw_path.startswith("/tron/api/v1/gasfree/")
        assert "/" not in raw_path[len("/tron/api/v1/gasfree/") :]
        expected = generate_signature("test-secret", "GET", raw_path, 1700000000)
        assert request.headers["Authorization"] == f"ApiKey test-key:{expected}"


class TestResponseHandling:
    @respx.mock
    def test_missing_data_yields_empty_result(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            return_value=httpx.Response(200, json={"code": 200, "message": "ok"})
        )
        assert client.get_all_tokens() == {}

    @respx.mock
    def test_null_data_yields_empty_result(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            return_value=httpx.Response(200, json={"code": 200, "data": None})
        )
        assert client.get_all_tokens() == {}

    @respx.mock
    def test_known_reason_raises_typed_error(self, client, transfer_params):
        respx.post(f"{MAINNET_URL}/api/v1/gasfree/submit").mock(
            return_value=httpx.Response(
                400,
                json={
                    "code": 400,
                    "reason": "InvalidSignatureException",
                    "message": "signature mismatch",
                },
            )
        )
        with pytest.raises(InvalidSignatureError) as exc_info:
            client.submit_transfer(transfer_params)

        error = exc_info.value
        assert error.reason is ErrorReason.INVALID_SIGNATURE
        assert error.reason.value == "InvalidSignatureException"
        assert error.message == "signature mismatch"
        assert error.status_code == 400

    @respx.mock
    def test_unknown_reason_raises_generic_error(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/gasfree/trace-2").mock(
            return_value=httpx.Response(
                500, json={"code": 50012, "reason": "NewException", "message": "internal"}
            )
        )
        with pytest.raises(ApiError) as exc_info:
            client.get_transfer_details("trace-2")

        error = exc_info.value
        assert type(error) is ApiError
        assert error.reason is None
        assert error.code == 50012
        assert error.message == "internal"

    @respx.mock
    def test_error_without_code_uses_http_status(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            return_value=httpx.Response(401, json={"message": "unauthorized"})
        )
        with pytest.raises(ApiError) as exc_info:
            client.get_all_tokens()
        assert exc_info.value.code == 401

    @respx.mock
    def test_non_json_body_raises_parse_error(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            return_value=httpx.Response(502, text="<html>Bad Gateway</html>")
        )
        with pytest.raises(ResponseParseError) as exc_info:
            client.get_all_tokens()
        assert exc_info.value.status_code == 502
        assert "Bad Gateway" in exc_info.value.body
        assert exc_info.value.kind is ErrorKind.RESPONSE_PARSE

    @respx.mock
    def test_non_object_json_yields_empty_result(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            return_value=httpx.Response(200, json=["not", "an", "envelope"])
        )
        assert client.get_all_tokens() == {}

    @respx.mock
    def test_non_object_json_error_raises_api_error(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            return_value=httpx.Response(503, json="maintenance")
        )
        with pytest.raises(ApiError) as exc_info:
            client.get_all_tokens()
        assert exc_info.value.code == 503

    @respx.mock
    def test_loosely_typed_error_payload_raises_api_error(self, client, transfer_params):
        respx.post(f"{MAINNET_URL}/api/v1/gasfree/submit").mock(
            return_value=httpx.Response(
                400, json={"code": 400, "message": ["a invalid", "b invalid"]}
            )
        )
        with pytest.raises(ApiError) as exc_info:
            client.submit_transfer(transfer_params)

        error = exc_info.value
        assert type(error) is ApiError
        assert error.code == 400
        assert error.message == "a invalid; b invalid"

    @respx.mock
    def test_non_integer_code_falls_back_to_http_status(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            return_value=httpx.Response(
                422, json={"code": "E_BAD", "message": {"field": "x"}, "reason": ["x"]}
            )
        )
        with pytest.raises(ApiError) as exc_info:
            client.get_all_tokens()

        assert exc_info.value.code == 422
        assert exc_info.value.reason is None
        assert "field" in exc_info.value.message

    @respx.mock
    def test_connection_failure_raises_transport_error(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/token/all").mock(
            side_effect=httpx.ConnectError("connection refused")
        )
        with pytest.raises(TransportError) as exc_info:
            client.get_all_tokens()
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.kind is ErrorKind.TRANSPORT

    @respx.mock
    def test_timeout_raises_transport_error(self, client):
        respx.get(f"{MAINNET_URL}/api/v1/config/provider/all").mock(
            side_effect=httpx.ReadTimeout("timed out")
        )
        with pytest.raises(TransportError):
            client.get_all_providers()


class TestLifecycle:
    def test_injected_http_client_is_not_closed(self, api_key, api_secret):
        http_client = httpx.Client()
        client = GasFreeClient(api_key, api_secret, http_client=http_client)
        client.close()
        assert not http_client.is_closed
        http_client.close()

    def test_owned_http_client_uses_timeout(self, api_key, api_secret):
        client = GasFreeClient(api_key, api_secret, timeout=2.5)
        http_client = client._get_client()
        assert http_client.timeout.read == 2.5
        client.close()
        assert http_client.is_closed
