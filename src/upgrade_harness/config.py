"""Configuration constants for upgrade-harness."""

from pathlib import Path

# Version
__version__ = "0.1.0"

# Environment
HOME_ENV_VAR = "IPFS_PATH"
"""Environment variable pointing the node binary at its home directory"""

DEFAULT_NODE_HOME = Path("~/.ipfs")
"""Node home used when HOME_ENV_VAR is unset"""

STAGING_DIR_NAME = "update-staging"
"""Directory under the node home that holds per-run sandboxes"""

SANDBOX_PREFIX = "test"

# Files the candidate reads or writes inside its sandbox
CONFIG_FILE_NAME = "config"
API_FILE_NAME = "api"
DAEMON_STDOUT_NAME = "daemon.stdout"
DAEMON_STDERR_NAME = "daemon.stderr"

# Isolated bind addresses written into the candidate config
ISOLATED_API_ADDRESS = "/ip4/127.0.0.1/tcp/0"
ISOLATED_GATEWAY_ADDRESS = ""
ISOLATED_SWARM_ADDRESSES = ["/ip4/0.0.0.0/tcp/0"]

# Readiness polling
READINESS_FILE_ATTEMPTS = 15
CONNECT_ATTEMPTS = 10
POLL_INTERVAL_SECONDS = 0.1
"""Linear backoff unit: the wait after attempt N is N times this value"""

FALLBACK_API_ENDPOINT = "localhost:5001"
"""Assumed API endpoint for binaries that never write the api file (pre 0.3.8)"""

# Version gating
PORT_ZERO_MIN_VERSION = "v0.3.8"
"""First release able to bind its API to port zero"""

VERSION_OUTPUT_PREFIX = "ipfs version"

# Smoke test fixtures
SMOKE_PAYLOAD = "hello world! This node should work"
SMOKE_PAYLOAD_CID = "QmTFJQ68kaArzsqz2Yjg1yMyEA5TXTfNw6d9wSFhxtBxz2"
"""Content identifier produced by adding SMOKE_PAYLOAD with default settings"""

# Settings file
DEFAULT_SETTINGS_FILE = Path("upgrade-harness.toml")
SETTINGS_TABLE = "harness"

# Safe remover
RELOCATED_TIMESTAMP_FORMAT = "%Y.%m.%d-%H.%M.%S"
