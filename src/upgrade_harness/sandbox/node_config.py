"""Rewrite a freshly initialized node config for isolated testing.

The config is handled as a plain JSON tree rather than a schema, so fields
added by newer releases pass through untouched.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from upgrade_harness.config import (
    CONFIG_FILE_NAME,
    ISOLATED_API_ADDRESS,
    ISOLATED_GATEWAY_ADDRESS,
    ISOLATED_SWARM_ADDRESSES,
)
from upgrade_harness.errors import ConfigError


def _get_object(tree: dict[str, Any], *keys: str) -> dict[str, Any]:
    """Walk ``keys`` down ``tree``, requiring a JSON object at every level."""
    node: Any = tree
    for depth, key in enumerate(keys, start=1):
        node = node.get(key) if isinstance(node, dict) else None
        if not isinstance(node, dict):
            dotted = ".".join(keys[:depth])
            raise ConfigError(f"config field {dotted} is missing or not an object")
    return node


def read_config(home: Path) -> dict[str, Any]:
    """Load the node config in ``home`` as a JSON object."""
    config_path = home / CONFIG_FILE_NAME
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"error reading config {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"config {config_path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config {config_path} is not a JSON object")
    return data


def write_config(home: Path, config: dict[str, Any]) -> None:
    """Replace the node config in ``home`` in one step.

    Writes a sibling temp file and renames it over the original, so a
    failed write never leaves a truncated config behind.
    """
    config_path = home / CONFIG_FILE_NAME
    payload = json.dumps(config, indent=2)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{CONFIG_FILE_NAME}-", dir=home)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, config_path)
    except OSError as e:
        Path(tmp_name).unlink(missing_ok=True)
        raise ConfigError(f"error writing tweaked config: {e}") from e


def tweak_config(home: Path) -> dict[str, Any]:
    """Point the node in ``home`` at ephemeral ports with discovery off.

    After this the API listens on a loopback port chosen by the OS, the
    gateway is disabled, swarm binds an ephemeral port on all interfaces,
    and mDNS is off, so the node can't collide with a production node on
    the same machine.

    Returns:
        The config as written

    Raises:
        ConfigError: If the config can't be read or written, or lacks the
            Discovery.MDNS or Addresses objects. Nothing is written then.
    """
    config = read_config(home)

    _get_object(config, "Discovery", "MDNS")["Enabled"] = False

    addresses = config.get("Addresses")
    if not isinstance(addresses, dict):
        raise ConfigError("no addresses field in config")

    addresses["API"] = ISOLATED_API_ADDRESS
    addresses["Gateway"] = ISOLATED_GATEWAY_ADDRESS
    addresses["Swarm"] = list(ISOLATED_SWARM_ADDRESSES)

    write_config(home, config)
    return config
