import os
from typing import Dict, Any, Optional

import yaml
from dotenv import load_dotenv

# Load .env file from parent directory
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))

CONFIG_PATH = os.path.join(os.path.dirname(__file__), "config_data.yaml")


def load_config_data(config_path: Optional[str] = None) -> Dict[str, Any]:
    path = config_path or CONFIG_PATH
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_settings(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Resolve bridge settings from config_data.yaml and the environment.

    Environment overrides:
        THOR_NETWORK: network key in config_data.yaml (default "mainnet")
        THOR_URL:     explicit node url, wins over the network url
        BRIDGE_HOST / BRIDGE_PORT: HTTP listen address

    Raises:
        ValueError: If THOR_NETWORK is unknown and no THOR_URL is given
    """
    config_data = load_config_data(config_path)
    networks = config_data.get("networks", {})
    thor = config_data.get("thor", {})
    server = config_data.get("server", {})

    network = os.getenv("THOR_NETWORK", "mainnet").strip().lower()
    url = (os.getenv("THOR_URL") or "").strip()

    if not url:
        if network not in networks:
            raise ValueError(
                f"Unknown network '{network}', expected one of {sorted(networks)}"
            )
        url = networks[network]["url"]
    else:
        network = "custom"

    settings = {
        "network": network,
        "thor_url": url.rstrip("/"),
        "request_timeout": float(thor.get("request_timeout", 30)),
        "poll_interval": float(thor.get("poll_interval", 10)),
        "host": os.getenv("BRIDGE_HOST", server.get("host", "0.0.0.0")),
        "port": int(os.getenv("BRIDGE_PORT", server.get("port", 8545))),
    }

    print(f"[Config] Network: {settings['network']} -> {settings['thor_url']}")
    return settings
