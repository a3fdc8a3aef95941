"""
Network configuration and default settings for near-deploy.
"""
import importlib.resources
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# 30 TGas, the default attached to function calls by the chain SDKs
DEFAULT_FUNCTION_CALL_GAS = 30 * 10**12
DEFAULT_INIT_FUNCTION = "new"
PROJECT_KEY_DIR = "./neardev"
CREDENTIALS_DIR = os.path.join(os.path.expanduser("~"), ".near-credentials")
SETTINGS_PATH = os.path.join(os.path.expanduser("~"), ".near-config", "settings.json")
TESTNET_JSVM_CONTRACT_ID = "jsvm.testnet"
PRODUCTION_NETWORK_ID = "mainnet"
DEFAULT_NETWORK_ID = "testnet"

NETWORK_ALIASES = {
    "production": "mainnet",
    "development": "testnet",
}


class Settings(BaseModel):
    """Defaults injected into command handlers."""
    default_function_call_gas: int = DEFAULT_FUNCTION_CALL_GAS
    default_init_function: str = DEFAULT_INIT_FUNCTION
    project_key_directory: str = PROJECT_KEY_DIR
    credentials_directory: str = CREDENTIALS_DIR
    settings_path: str = SETTINGS_PATH
    testnet_jsvm_contract_id: str = TESTNET_JSVM_CONTRACT_ID
    production_network_id: str = PRODUCTION_NETWORK_ID


class NetworkConfig:
    """Lookup of bundled network endpoints with environment overrides."""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the bundled network table.

        Returns:
            Mapping of network id to its configuration
        """
        if cls._networks_cache is not None:
            return cls._networks_cache

        resource = importlib.resources.files("near_deploy").joinpath("networks.json")
        with resource.open("r") as f:
            cls._networks_cache = json.load(f)
        return cls._networks_cache

    @classmethod
    def get_network(cls, network_id: str) -> Dict[str, Any]:
        """
        Get the configuration of a single network.

        Raises:
            ConfigurationError: If the network is not known
        """
        networks = cls.load_networks()
        if network_id not in networks:
            available = ", ".join(sorted(networks))
            raise ConfigurationError(
                f"Unknown network id '{network_id}'. Available networks: {available}"
            )
        return networks[network_id]

    @classmethod
    def _get_url(cls, network_id: str, field: str, override: Optional[str]) -> Optional[str]:
        if override:
            return override

        # e.g. TESTNET_NODE_URL
        env_name = f"{network_id.upper().replace('-', '_')}_{field.upper()}_URL"
        env_value = os.environ.get(env_name)
        if env_value:
            logger.debug(f"Using {env_name} from environment")
            return env_value

        return cls.load_networks().get(network_id, {}).get(f"{field}Url")

    @classmethod
    def get_node_url(cls, network_id: str, override: Optional[str] = None) -> str:
        url = cls._get_url(network_id, "node", override)
        if not url:
            # unknown networks must name their node
            cls.get_network(network_id)
            raise ConfigurationError(f"No node URL configured for network '{network_id}'")
        return url

    @classmethod
    def get_helper_url(cls, network_id: str, override: Optional[str] = None) -> Optional[str]:
        return cls._get_url(network_id, "helper", override)

    @classmethod
    def get_explorer_url(cls, network_id: str, override: Optional[str] = None) -> Optional[str]:
        return cls._get_url(network_id, "explorer", override)


def resolve_network_id(explicit: Optional[str] = None) -> str:
    """
    Work out which network to talk to.

    Order: explicit value, NEAR_ENV, NODE_ENV, then testnet. ``production``
    and ``development`` are accepted as aliases.
    """
    network_id = explicit or os.environ.get("NEAR_ENV") or os.environ.get("NODE_ENV") or DEFAULT_NETWORK_ID
    return NETWORK_ALIASES.get(network_id, network_id)
