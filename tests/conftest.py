"""Pytest configuration and fixtures for upgrade-harness tests."""

import logging
import socket
import stat
import sys
import textwrap
from pathlib import Path

import pytest

from upgrade_harness.models.settings import HarnessSettings
from upgrade_harness.plugins import reset_plugins

# Stand-in for a node binary. It keeps its "blocks" as files named by
# content identifier; the smoke payload maps to its real identifier.
FAKE_NODE_SOURCE = '''\
import json
import os
import socket
import sys
import time
import hashlib

VERSION = {version!r}
WRITE_API_FILE = {write_api_file!r}
LISTEN = {listen!r}
FAIL_INIT = {fail_init!r}
KNOWN_CIDS = {{"hello world! This node should work": "QmTFJQ68kaArzsqz2Yjg1yMyEA5TXTfNw6d9wSFhxtBxz2"}}

home = os.environ["IPFS_PATH"]
blocks = os.path.join(home, "blocks")
args = sys.argv[1:]


def main():
    if args == ["init"]:
        if FAIL_INIT:
            print("Error: ipfs configuration file already exists!")
            return 1
        os.makedirs(blocks, exist_ok=True)
        config = {{
            "Identity": {{"PeerID": "QmFakePeer"}},
            "Discovery": {{"MDNS": {{"Enabled": True, "Interval": 10}}}},
            "Addresses": {{
                "API": "/ip4/127.0.0.1/tcp/5001",
                "Gateway": "/ip4/127.0.0.1/tcp/8080",
                "Swarm": ["/ip4/0.0.0.0/tcp/4001"],
            }},
        }}
        with open(os.path.join(home, "config"), "w") as f:
            json.dump(config, f)
        print("initializing ipfs node at " + home)
        return 0

    if args == ["version"]:
        print("ipfs version " + VERSION)
        return 0

    if args == ["daemon"]:
        with open(os.path.join(home, "config")) as f:
            config = json.load(f)
        port = int(config["Addresses"]["API"].rsplit("/", 1)[-1])
        if LISTEN:
            server = socket.socket()
            server.bind(("127.0.0.1", port))
            server.listen(16)
            port = server.getsockname()[1]
        if WRITE_API_FILE:
            with open(os.path.join(home, "api"), "w") as f:
                f.write("/ip4/127.0.0.1/tcp/%d" % port)
        print("Daemon is ready", flush=True)
        while True:
            time.sleep(1)

    if args == ["add", "-q"]:
        data = sys.stdin.read()
        cid = KNOWN_CIDS.get(data) or "Qm" + hashlib.sha256(data.encode()).hexdigest()
        with open(os.path.join(blocks, cid), "w") as f:
            f.write(data)
        print(cid)
        return 0

    if len(args) == 2 and args[0] == "cat":
        path = os.path.join(blocks, args[1])
        if not os.path.exists(path):
            print("Error: merkledag: not found")
            return 1
        with open(path) as f:
            sys.stdout.write(f.read())
        return 0

    if args == ["refs", "local"]:
        for name in sorted(os.listdir(blocks)):
            print(name)
        return 0

    print("Error: unknown command " + " ".join(args))
    return 1


sys.exit(main())
'''


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test.

    Tests that call setup_logging() must not break caplog in later tests.
    """
    yield

    logger = logging.getLogger("upgrade_harness")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture(autouse=True)
def reset_plugin_manager():
    """Start every test with only the bundled plugins."""
    reset_plugins()
    yield
    reset_plugins()


@pytest.fixture
def closed_port() -> int:
    """A loopback port nothing is listening on."""
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def fast_settings(tmp_path: Path, closed_port: int) -> HarnessSettings:
    """Settings with short polling and a private staging root."""
    return HarnessSettings(
        staging_root=tmp_path / "staging",
        readiness_file_attempts=10,
        connect_attempts=5,
        poll_interval=0.05,
        fallback_endpoint=f"127.0.0.1:{closed_port}",
        command_timeout=30,
    )


@pytest.fixture
def fake_node(tmp_path: Path):
    """Factory writing an executable fake node binary.

    Usage:
        binary = fake_node(version="0.5.0")
    """
    if sys.platform == "win32":
        pytest.skip("fake node binary relies on a shebang line")

    def make(
        version: str = "0.5.0",
        write_api_file: bool = True,
        listen: bool = True,
        fail_init: bool = False,
        name: str = "ipfs",
    ) -> Path:
        source = FAKE_NODE_SOURCE.format(
            version=version,
            write_api_file=write_api_file,
            listen=listen,
            fail_init=fail_init,
        )
        binary = tmp_path / "bin" / name
        binary.parent.mkdir(parents=True, exist_ok=True)
        binary.write_text(f"#!{sys.executable}\n" + textwrap.dedent(source))
        binary.chmod(binary.stat().st_mode | stat.S_IXUSR)
        return binary

    return make
