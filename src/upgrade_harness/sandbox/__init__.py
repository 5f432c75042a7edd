from upgrade_harness.sandbox.node_config import read_config, tweak_config, write_config
from upgrade_harness.sandbox.sandbox import Sandbox

__all__ = ["Sandbox", "read_config", "tweak_config", "write_config"]
