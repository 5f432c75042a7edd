"""Plugin system for upgrade-harness.

Uses Pluggy for plugin discovery and hook management. The bundled
relocation strategy is picked once, from the platform the harness runs on,
when the plugin list is built:

    from upgrade_harness.plugins import initialize_plugins, relocate_path
"""

import contextlib
import importlib
import sys
from pathlib import Path

import pluggy

from upgrade_harness.logging_config import get_logger
from upgrade_harness.plugins.hookspecs import RemovalSpec

logger = get_logger(__name__)


if sys.platform == "win32":
    DEFAULT_PLUGINS: tuple[str, ...] = ("upgrade_harness.plugins.bundled.windows_relocate",)
else:
    DEFAULT_PLUGINS = ("upgrade_harness.plugins.bundled.posix_relocate",)


pm = pluggy.PluginManager("upgrade_harness")
pm.add_hookspecs(RemovalSpec)

_initialized: bool = False


def _load_default_plugins() -> None:
    """Load plugins bundled with upgrade-harness."""
    for plugin_path in DEFAULT_PLUGINS:
        module = importlib.import_module(plugin_path)
        pm.register(module, name=plugin_path)
        logger.debug(f"Loaded plugin: {plugin_path}")


def _load_external_plugins() -> None:
    """Discover and load external plugins via entry points."""
    try:
        num_loaded = pm.load_setuptools_entrypoints("upgrade_harness")
        if num_loaded > 0:
            logger.debug(f"Loaded {num_loaded} external plugin(s)")
    except Exception as e:
        logger.warning(f"Error loading external plugins: {e}")


def initialize_plugins() -> None:
    """Initialize the plugin system.

    Loads bundled plugins first, then external plugins. Pluggy calls
    later registrations first, so an external relocation strategy wins
    over the bundled one. Idempotent.
    """
    global _initialized

    if _initialized:
        return

    _load_default_plugins()
    _load_external_plugins()

    _initialized = True
    logger.debug(f"Plugin system initialized with {len(pm.get_plugins())} plugin(s)")


def reset_plugins() -> None:
    """Unregister every plugin so the next initialize starts over (for tests)."""
    global _initialized

    for plugin in list(pm.get_plugins()):
        with contextlib.suppress(ValueError):
            pm.unregister(plugin)

    _initialized = False


def get_plugins() -> list[dict]:
    """Get name and module of each loaded plugin."""
    initialize_plugins()

    return [
        {"name": pm.get_name(plugin), "module": getattr(plugin, "__name__", str(plugin))}
        for plugin in pm.get_plugins()
    ]


def relocate_path(source: Path, destination: Path) -> Path | None:
    """Ask the registered strategies to move ``source`` to ``destination``.

    Returns:
        Where the source ended up, or None if no plugin handled it
    """
    initialize_plugins()
    return pm.hook.relocate_path(source=source, destination=destination)


__all__ = [
    "pm",
    "DEFAULT_PLUGINS",
    "initialize_plugins",
    "reset_plugins",
    "get_plugins",
    "relocate_path",
]
