"""Plugin discovery and capability collection.

Discovery: the built-in plugin plus entry points in the ``objmap.plugins``
group. Each plugin may contribute named converter and resolver factories.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

import pluggy

from objmap.plugins.hookspecs import PROJECT_NAME, ObjmapHookSpec

ENTRY_POINT_GROUP = "objmap.plugins"

logger = logging.getLogger(__name__)

Factory = Callable[..., Any]


class PluginManager:
    """Manages plugin loading and the converter/resolver name tables."""

    def __init__(self, *, builtins: bool = True) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(ObjmapHookSpec)
        self._loaded: bool = False
        if builtins:
            from objmap.plugins.builtins.converters import BuiltinConvertersPlugin

            self.register_plugin(BuiltinConvertersPlugin(), name="builtin-converters")

    def discover_and_load(self, *, disabled: list[str] | None = None) -> list[str]:
        """Load entry-point plugins and return every registered plugin name.

        Plugins listed in *disabled* are blocked before loading.
        """
        for name in disabled or []:
            self._pm.set_blocked(name)
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    def list_plugin_names(self) -> list[str]:
        """Registered plugin names in registration order."""
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    # ------------------------------------------------------------------
    # Capability tables
    # ------------------------------------------------------------------

    def converters(self) -> dict[str, Factory]:
        """Merged ``name -> converter factory`` table across all plugins."""
        return self._collect("register_converters")

    def resolvers(self) -> dict[str, Factory]:
        """Merged ``name -> resolver factory`` table across all plugins."""
        return self._collect("register_resolvers")

    def _collect(self, hook_name: str) -> dict[str, Factory]:
        """Call *hook_name* on each plugin individually and merge the tables.

        A plugin that raises or returns something other than a dict is
        skipped with a warning. On name clashes the later plugin wins.
        """
        table: dict[str, Factory] = {}
        for plugin_name, plugin in self._pm.list_name_plugin():
            if plugin is None:
                continue
            hook = getattr(plugin, hook_name, None)
            if hook is None:
                continue
            try:
                contributed = hook()
            except Exception:
                logger.warning(
                    "Plugin %s failed in %s", plugin_name, hook_name, exc_info=True
                )
                continue
            if contributed is None:
                continue
            if not isinstance(contributed, dict):
                logger.warning("Plugin %s returned non-dict from %s", plugin_name, hook_name)
                continue
            for name, factory in contributed.items():
                if not callable(factory):
                    logger.warning(
                        "Skipping %r from plugin %s: not callable", name, plugin_name
                    )
                    continue
                if name in table:
                    logger.debug("Plugin %s overrides %r", plugin_name, name)
                table[name] = factory
        return table

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly; hooks on a
        class object would be called with ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s", plugin_name, exc_info=True
                )
                continue
            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
