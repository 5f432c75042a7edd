import json
from pathlib import Path
from unittest.mock import patch

import pytest

from upgrade_harness.errors import ConfigError
from upgrade_harness.sandbox.node_config import read_config, tweak_config


def initialized_config() -> dict:
    return {
        "Identity": {"PeerID": "QmPeer", "PrivKey": "secret"},
        "Datastore": {"StorageMax": "10GB"},
        "Discovery": {"MDNS": {"Enabled": True, "Interval": 10}},
        "Addresses": {
            "API": "/ip4/127.0.0.1/tcp/5001",
            "Gateway": "/ip4/127.0.0.1/tcp/8080",
            "Swarm": ["/ip4/0.0.0.0/tcp/4001", "/ip6/::/tcp/4001"],
            "Announce": [],
        },
    }


@pytest.fixture
def home(tmp_path: Path) -> Path:
    (tmp_path / "config").write_text(json.dumps(initialized_config()))
    return tmp_path


class TestTweakConfig:
    def test_isolates_addresses_and_discovery(self, home: Path):
        tweak_config(home)

        config = json.loads((home / "config").read_text())
        assert config["Discovery"]["MDNS"]["Enabled"] is False
        assert config["Addresses"]["API"] == "/ip4/127.0.0.1/tcp/0"
        assert config["Addresses"]["Gateway"] == ""
        assert config["Addresses"]["Swarm"] == ["/ip4/0.0.0.0/tcp/0"]

    def test_preserves_unknown_fields(self, home: Path):
        tweak_config(home)

        config = json.loads((home / "config").read_text())
        assert config["Identity"] == {"PeerID": "QmPeer", "PrivKey": "secret"}
        assert config["Datastore"] == {"StorageMax": "10GB"}
        assert config["Discovery"]["MDNS"]["Interval"] == 10
        assert config["Addresses"]["Announce"] == []

    def test_returns_written_config(self, home: Path):
        written = tweak_config(home)

        assert written == json.loads((home / "config").read_text())

    def test_idempotent(self, home: Path):
        first = tweak_config(home)
        second = tweak_config(home)

        assert second["Addresses"] == first["Addresses"]
        assert second["Discovery"] == first["Discovery"]

    def test_missing_addresses_fails_without_writing(self, tmp_path: Path):
        config = initialized_config()
        del config["Addresses"]
        original = json.dumps(config)
        (tmp_path / "config").write_text(original)

        with pytest.raises(ConfigError, match="no addresses field in config"):
            tweak_config(tmp_path)

        assert (tmp_path / "config").read_text() == original

    def test_addresses_of_wrong_type_fails(self, tmp_path: Path):
        config = initialized_config()
        config["Addresses"] = ["/ip4/127.0.0.1/tcp/5001"]
        (tmp_path / "config").write_text(json.dumps(config))

        with pytest.raises(ConfigError, match="no addresses field"):
            tweak_config(tmp_path)

    def test_missing_mdns_names_the_field(self, tmp_path: Path):
        config = initialized_config()
        config["Discovery"] = {}
        (tmp_path / "config").write_text(json.dumps(config))

        with pytest.raises(ConfigError, match=r"Discovery\.MDNS is missing"):
            tweak_config(tmp_path)

    def test_missing_discovery_names_the_field(self, tmp_path: Path):
        config = initialized_config()
        del config["Discovery"]
        (tmp_path / "config").write_text(json.dumps(config))

        with pytest.raises(ConfigError, match=r"Discovery is missing"):
            tweak_config(tmp_path)

    def test_missing_config_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="error reading config"):
            tweak_config(tmp_path)

    def test_invalid_json(self, tmp_path: Path):
        (tmp_path / "config").write_text("{not json")

        with pytest.raises(ConfigError, match="not valid JSON"):
            tweak_config(tmp_path)

    def test_write_failure_leaves_original_and_no_temp_files(self, home: Path):
        original = (home / "config").read_text()

        with (
            patch("upgrade_harness.sandbox.node_config.os.replace", side_effect=OSError("disk full")),
            pytest.raises(ConfigError, match="error writing tweaked config"),
        ):
            tweak_config(home)

        assert (home / "config").read_text() == original
        assert sorted(p.name for p in home.iterdir()) == ["config"]


class TestReadConfig:
    def test_rejects_non_object(self, tmp_path: Path):
        (tmp_path / "config").write_text("[1, 2, 3]")

        with pytest.raises(ConfigError, match="not a JSON object"):
            read_config(tmp_path)
