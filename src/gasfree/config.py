"""
GasFree Network Configuration
Centralized configuration for relay endpoints, chain IDs and controller contracts
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

from gasfree.exceptions import ConfigurationError

DEFAULT_TIMEOUT = 30.0


class Network(str, Enum):
    """Supported TRON networks"""

    MAINNET = "mainnet"
    TESTNET = "nile"


@dataclass(frozen=True)
class NetworkProfile:
    """Static settings of one GasFree deployment"""

    chain_id: int
    base_url: str
    verifying_contract: str


class NetworkConfig:
    """Network configuration for GasFree relay endpoints and contracts"""

    MAINNET = Network.MAINNET
    TESTNET = Network.TESTNET

    # TRON Chain IDs
    CHAIN_IDS: Dict[Network, int] = {
        Network.MAINNET: 728126428,  # 0x2b6653dc
        Network.TESTNET: 3448148188,  # 0xcd8690dc
    }

    # GasFree relay API base URLs
    BASE_URLS: Dict[Network, str] = {
        Network.MAINNET: "https://open.gasfree.io/tron",
        Network.TESTNET: "https://open-test.gasfree.io/nile",
    }

    # GasFreeController contract addresses
    CONTROLLER_ADDRESSES: Dict[Network, str] = {
        Network.MAINNET: "TFFAMQLZybALaLb4uxHA9RBE7pxhUAjF3U",
        Network.TESTNET: "THQGuFzL87ZqhxkgqYEryRAd7gqFqL5rdc",
    }

    # Accepted spellings for parse_network
    ALIASES: Dict[str, Network] = {
        "mainnet": Network.MAINNET,
        "tron": Network.MAINNET,
        "tron:mainnet": Network.MAINNET,
        "nile": Network.TESTNET,
        "testnet": Network.TESTNET,
        "tron:nile": Network.TESTNET,
    }

    @classmethod
    def parse_network(cls, value: "str | Network") -> Network:
        """Resolve a network name (e.g. "mainnet", "nile", "tron:nile")

        Raises:
            ConfigurationError: If the name is not a supported network
        """
        if isinstance(value, Network):
            return value
        if not isinstance(value, str):
            raise ConfigurationError(f"Unsupported network: {value!r}")
        network = cls.ALIASES.get(value.strip().lower())
        if network is None:
            raise ConfigurationError(f"Unsupported network: {value}")
        return network

    @classmethod
    def get_profile(cls, network: "str | Network") -> NetworkProfile:
        """Get chain ID, base URL and controller contract for a network"""
        network = cls.parse_network(network)
        return NetworkProfile(
            chain_id=cls.CHAIN_IDS[network],
            base_url=cls.BASE_URLS[network],
            verifying_contract=cls.CONTROLLER_ADDRESSES[network],
        )

    @classmethod
    def get_chain_id(cls, network: "str | Network") -> int:
        return cls.CHAIN_IDS[cls.parse_network(network)]

    @classmethod
    def get_base_url(cls, network: "str | Network") -> str:
        return cls.BASE_URLS[cls.parse_network(network)]

    @classmethod
    def get_verifying_contract(cls, network: "str | Network") -> str:
        return cls.CONTROLLER_ADDRESSES[cls.parse_network(network)]


@dataclass(frozen=True)
class ClientConfig:
    """Credentials and connection settings for a GasFree client

    Args:
        api_key: GasFree API key
        api_secret: GasFree API secret used for HMAC request signing
        network: Target network
        timeout: Request timeout in seconds
        base_url: Override for the network's relay URL (e.g. a proxy)
    """

    api_key: str
    api_secret: str
    network: Network = Network.MAINNET
    timeout: float = DEFAULT_TIMEOUT
    base_url: str | None = None

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError("GasFree API key is required")
        if not self.api_secret:
            raise ConfigurationError("GasFree API secret is required")
        if self.timeout <= 0:
            raise ConfigurationError(f"Timeout must be positive, got {self.timeout}")
        object.__setattr__(self, "network", NetworkConfig.parse_network(self.network))

    @property
    def is_testnet(self) -> bool:
        return self.network is Network.TESTNET

    @property
    def profile(self) -> NetworkProfile:
        return NetworkConfig.get_profile(self.network)

    @property
    def resolved_base_url(self) -> str:
        return (self.base_url or self.profile.base_url).rstrip("/")

    @classmethod
    def from_env(cls, dotenv_path: "str | Path | None" = None) -> "ClientConfig":
        """Load configuration from environment variables

        Reads GASFREE_API_KEY, GASFREE_API_SECRET, GASFREE_NETWORK and
        GASFREE_TIMEOUT, after loading a .env file if one is found.
        Variables already set in the environment take precedence.
        """
        load_dotenv(dotenv_path)

        timeout_raw = os.getenv("GASFREE_TIMEOUT")
        try:
            timeout = float(timeout_raw) if timeout_raw else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"Invalid GASFREE_TIMEOUT: {timeout_raw}")

        return cls(
            api_key=os.getenv("GASFREE_API_KEY", ""),
            api_secret=os.getenv("GASFREE_API_SECRET", ""),
            network=NetworkConfig.parse_network(os.getenv("GASFREE_NETWORK", "mainnet")),
            timeout=timeout,
            base_url=os.getenv("GASFREE_BASE_URL") or None,
        )
