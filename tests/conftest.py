"""
Pytest configuration and shared fixtures
"""

import time

import pytest

USDT_MAINNET = "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t"
PROVIDER = "TFFAMQLZybALaLb4uxHA9RBE7pxhUAjF3U"
USER = "THQGuFzL87ZqhxkgqYEryRAd7gqFqL5rdc"
RECEIVER = "T9yD14Nj9j7xAB4dbGeiX9h8unkKHxuWwb"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def api_key():
    return "test-key"


@pytest.fixture
def api_secret():
    return "test-secret"


@pytest.fixture
def transfer_params():
    """A complete, valid transfer authorization"""
    return {
        "token": USDT_MAINNET,
        "serviceProvider": PROVIDER,
        "user": USER,
        "receiver": RECEIVER,
        "value": "1000000",
        "maxFee": "100000",
        "deadline": int(time.time()) + 180,
        "version": 1,
        "nonce": 3,
        "sig": "ab" * 65,
    }
