"""Running the candidate as a background daemon.

The daemon writes its API multiaddr (``/ip4/127.0.0.1/tcp/<port>``) to the
``api`` file in its home once it is listening. The supervisor polls for
that file, then for a TCP connection, before handing the process back.
"""

from __future__ import annotations

import contextlib
import socket
import subprocess
from pathlib import Path
from typing import IO

from upgrade_harness.config import API_FILE_NAME, DAEMON_STDERR_NAME, DAEMON_STDOUT_NAME
from upgrade_harness.errors import DaemonError
from upgrade_harness.logging_config import get_logger
from upgrade_harness.models.settings import HarnessSettings
from upgrade_harness.polling import poll
from upgrade_harness.process.commands import sandboxed_env

logger = get_logger(__name__)

API_HOST = "localhost"
CONNECT_TIMEOUT_SECONDS = 1.0
MAX_PORT = 65535


class ManagedProcess:
    """A spawned daemon plus the files its output streams go to.

    ``close()`` kills the process, reaps it and closes both files. It runs
    at most once; later calls return immediately.
    """

    def __init__(self, process: subprocess.Popen, stdout: IO, stderr: IO):
        self.process = process
        self.stdout = stdout
        self.stderr = stderr
        self.endpoint: tuple[str, int] | None = None
        self._closed = False

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Kill and reap the daemon, then release its stream files.

        The files are closed even if killing or waiting fails.

        Raises:
            DaemonError: If the process could not be killed or reaped
        """
        if self._closed:
            return
        self._closed = True

        try:
            try:
                self.process.kill()
            except OSError as e:
                logger.error(f"error killing daemon: {e}")
                raise DaemonError(f"error killing daemon: {e}") from e

            try:
                self.process.wait()
            except (OSError, subprocess.SubprocessError) as e:
                logger.error(f"error waiting on killed daemon: {e}")
                raise DaemonError(f"error waiting on killed daemon: {e}") from e
        finally:
            self.stderr.close()
            self.stdout.close()

    def __enter__(self) -> ManagedProcess:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ARG002
        logger.debug("Killing test daemon")
        try:
            self.close()
        except DaemonError as e:
            logger.warning(f"error killing test daemon: {e} (continuing anyway)")


def read_api_endpoint(api_file: Path) -> tuple[str, int] | None:
    """Parse the daemon's api file into a (host, port) pair.

    Returns:
        None if the file does not exist yet or is still empty

    Raises:
        DaemonError: If the file exists but can't be read or holds no port
    """
    try:
        content = api_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except OSError as e:
        raise DaemonError(f"error reading {api_file}: {e}") from e

    content = content.strip()
    if not content:
        # created but not written yet
        return None

    port = content.split("/")[-1]
    if not (port.isascii() and port.isdigit()) or int(port) > MAX_PORT:
        raise DaemonError(f"no port in api file {api_file}: {content!r}")
    return API_HOST, int(port)


def can_connect(endpoint: tuple[str, int]) -> bool:
    """Whether a TCP connection to ``endpoint`` succeeds right now."""
    try:
        with socket.create_connection(endpoint, timeout=CONNECT_TIMEOUT_SECONDS):
            return True
    except OSError:
        return False


def wait_for_api(home: Path, settings: HarnessSettings | None = None) -> tuple[str, int]:
    """Block until the daemon in ``home`` accepts connections.

    Returns:
        The (host, port) the daemon's API listens on

    Raises:
        DaemonError: If the daemon never came online within the attempt budget
    """
    settings = settings or HarnessSettings()
    logger.debug("Waiting on daemon to come online")

    endpoint = poll(
        lambda: read_api_endpoint(home / API_FILE_NAME),
        attempts=settings.readiness_file_attempts,
        interval=settings.poll_interval,
    )
    if endpoint is not None:
        logger.debug("Found api file")
    else:
        logger.debug("No api file found, trying fallback (happens pre 0.3.8)")
        endpoint = settings.fallback_address

    online = poll(
        lambda: True if can_connect(endpoint) else None,
        attempts=settings.connect_attempts,
        interval=settings.poll_interval,
    )
    if online is None:
        raise DaemonError("failed to come online")

    return endpoint


def _open_stream(path: Path) -> IO:
    try:
        return open(path, "w", encoding="utf-8")
    except OSError as e:
        raise DaemonError(f"cannot open daemon output file {path}: {e}") from e


def start_daemon(home: Path, binary: Path, settings: HarnessSettings | None = None) -> ManagedProcess:
    """Start ``binary daemon`` in ``home`` and wait until it is reachable.

    Output goes to daemon.stdout and daemon.stderr in ``home`` so it
    survives the process being killed.

    Raises:
        DaemonError: If the output files can't be opened, the process
            can't be spawned, or it never comes online. A daemon that
            started but never came online is killed before raising.
    """
    settings = settings or HarnessSettings()

    stdout = _open_stream(home / DAEMON_STDOUT_NAME)
    try:
        stderr = _open_stream(home / DAEMON_STDERR_NAME)
    except DaemonError:
        stdout.close()
        raise

    try:
        process = subprocess.Popen(
            [str(binary), "daemon"],
            env=sandboxed_env(home, settings),
            stdin=subprocess.DEVNULL,
            stdout=stdout,
            stderr=stderr,
        )
    except OSError as e:
        stdout.close()
        stderr.close()
        raise DaemonError(f"failed to start daemon: {e}") from e

    daemon = ManagedProcess(process, stdout, stderr)
    logger.debug(f"Started daemon with pid {daemon.pid}")

    try:
        daemon.endpoint = wait_for_api(home, settings)
    except BaseException:
        # close() logs its own failures; the readiness error is the one to report
        with contextlib.suppress(DaemonError):
            daemon.close()
        raise

    logger.debug(f"Daemon online at {daemon.endpoint[0]}:{daemon.endpoint[1]}")
    return daemon
