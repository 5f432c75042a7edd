from upgrade_harness.process.commands import execute, run_command, sandboxed_env
from upgrade_harness.process.daemon import ManagedProcess, start_daemon, wait_for_api

__all__ = [
    "ManagedProcess",
    "execute",
    "run_command",
    "sandboxed_env",
    "start_daemon",
    "wait_for_api",
]
