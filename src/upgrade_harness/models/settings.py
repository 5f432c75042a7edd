"""Tunables for a validation run and their TOML representation."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import tomlkit
from expandvars import expandvars
from tomlkit.exceptions import TOMLKitError

from upgrade_harness.config import (
    CONNECT_ATTEMPTS,
    DEFAULT_NODE_HOME,
    FALLBACK_API_ENDPOINT,
    HOME_ENV_VAR,
    POLL_INTERVAL_SECONDS,
    READINESS_FILE_ATTEMPTS,
    SETTINGS_TABLE,
    STAGING_DIR_NAME,
)
from upgrade_harness.errors import SettingsError


@dataclass
class HarnessSettings:
    """Settings for one upgrade check.

    Defaults reproduce the behaviour expected by node releases; tests and
    slow machines override the polling fields.
    """

    staging_root: Path | None = None
    """Parent of per-run sandboxes (default: <node home>/update-staging)"""

    home_env_var: str = HOME_ENV_VAR
    """Variable telling the candidate where its home directory is"""

    readiness_file_attempts: int = READINESS_FILE_ATTEMPTS
    connect_attempts: int = CONNECT_ATTEMPTS
    poll_interval: float = POLL_INTERVAL_SECONDS
    fallback_endpoint: str = FALLBACK_API_ENDPOINT

    command_timeout: float | None = None
    """Timeout for one-shot commands; None waits until they exit"""

    keep_on_failure: bool = False
    """Leave the sandbox behind when validation fails"""

    def __post_init__(self) -> None:
        if self.readiness_file_attempts < 0 or self.connect_attempts < 1:
            raise ValueError("readiness_file_attempts must be >= 0 and connect_attempts >= 1")
        if self.poll_interval < 0:
            raise ValueError("poll_interval must not be negative")
        if not self.fallback_endpoint.rpartition(":")[2].isdigit():
            raise ValueError(f"fallback_endpoint needs host:port, got {self.fallback_endpoint!r}")

    def resolve_staging_root(self) -> Path:
        if self.staging_root is not None:
            return self.staging_root.expanduser()
        node_home = os.environ.get(self.home_env_var) or DEFAULT_NODE_HOME
        return Path(node_home).expanduser() / STAGING_DIR_NAME

    @property
    def fallback_address(self) -> tuple[str, int]:
        host, _, port = self.fallback_endpoint.rpartition(":")
        return host or "localhost", int(port)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HarnessSettings:
        """Build settings from a plain mapping, expanding ${VAR} in strings.

        Raises:
            SettingsError: On keys that are not settings fields
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise SettingsError(f"Unknown settings: {', '.join(unknown)}")

        values = {k: expandvars(v) if isinstance(v, str) else v for k, v in data.items()}
        if values.get("staging_root") is not None:
            values["staging_root"] = Path(values["staging_root"])

        try:
            return cls(**values)
        except (TypeError, ValueError) as e:
            raise SettingsError(f"Invalid settings: {e}") from e

    def to_toml(self) -> str:
        """Render the settings as a TOML document with a [harness] table."""
        doc = tomlkit.document()
        doc.add(tomlkit.comment("upgrade-harness settings"))

        table = tomlkit.table()
        for name, value in asdict(self).items():
            if value is None:
                continue
            table[name] = str(value) if isinstance(value, Path) else value
        doc[SETTINGS_TABLE] = table

        return tomlkit.dumps(doc)


def load_settings(path: Path | None) -> HarnessSettings:
    """Load settings from a TOML file, or defaults when ``path`` is None.

    Raises:
        SettingsError: If the file can't be read or parsed
    """
    if path is None:
        return HarnessSettings()

    try:
        doc = tomlkit.parse(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SettingsError(f"Cannot read settings file {path}: {e}") from e
    except TOMLKitError as e:
        raise SettingsError(f"Invalid TOML in {path}: {e}") from e

    table = doc.unwrap().get(SETTINGS_TABLE, {})
    if not isinstance(table, dict):
        raise SettingsError(f"[{SETTINGS_TABLE}] in {path} must be a table")

    return HarnessSettings.from_dict(table)
