"""Plugin discovery and loading.

Discovery: entry_points in the ``gormlint.plugins`` group via pluggy's
setuptools loader, plus single-file plugins from ``.gormlint/plugins/``.
Registered keys and rules land in the domain registries.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pluggy

from gormlint.plugins.hookspecs import PROJECT_NAME, GormlintHookSpec

ENTRY_POINT_GROUP = "gormlint.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(GormlintHookSpec)
        self._loaded: bool = False
        self._registered_keys: list[str] = []
        self._registered_rules: list[str] = []

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        # Registration order: on a conflicting key the earlier plugin wins.
        for name, plugin in self._pm.list_name_plugin():
            if plugin is not None:
                self._apply_registrations(plugin, name)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        if self._loaded:
            self._apply_registrations(plugin, resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    def reset_registrations(self) -> None:
        """Remove every key and rule this manager added to the domain."""
        from gormlint.domain.rules.values import unregister_value_rule
        from gormlint.domain.vocabulary import unregister_tag_key

        for key in self._registered_keys:
            unregister_tag_key(key)
        for key in self._registered_rules:
            unregister_value_rule(key)
        self._registered_keys.clear()
        self._registered_rules.clear()

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def list_plugin_names(self) -> list[str]:
        return [name for name, plugin in self._pm.list_name_plugin() if plugin is not None]

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Load each ``*.py`` in *local_dir* and register its hook classes.

        ``_``-prefixed files are skipped.  A broken local plugin is logged
        and skipped, never raised.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"gormlint_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name or not self._has_hook_impls(obj):
                    continue
                try:
                    self._pm.register(obj(), name=f"{module_name}.{obj.__name__}")
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )
                    continue
                logger.debug("Loaded local plugin %s from %s", obj.__name__, py_file)

    def _normalize_plugin_instances(self) -> None:
        """Replace entry-point plugin classes with instances.

        Hooks dispatched against a class object leave ``self`` unbound.
        """
        for plugin_name, plugin in self._pm.list_name_plugin():
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue

            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            self._pm.register(instance, name=plugin_name)

    # ------------------------------------------------------------------
    # Vocabulary and rule registration
    # ------------------------------------------------------------------

    def _apply_registrations(self, plugin: object, plugin_name: str) -> None:
        from gormlint.domain.rules.values import register_value_rule
        from gormlint.domain.vocabulary import register_tag_key

        for key, value in self._collect(plugin, "register_tag_keys", plugin_name).items():
            if self._register_one(register_tag_key, key, value, plugin_name):
                self._registered_keys.append(key)
        for key, rule in self._collect(plugin, "register_value_rules", plugin_name).items():
            if self._register_one(register_value_rule, key, rule, plugin_name):
                self._registered_rules.append(key)

    @staticmethod
    def _collect(plugin: object, hook_name: str, plugin_name: str) -> dict[str, Any]:
        hook = getattr(plugin, hook_name, None)
        if hook is None:
            return {}
        try:
            mapping = hook()
        except Exception:
            logger.warning(
                "Plugin %s failed in %s", plugin_name, hook_name, exc_info=True
            )
            return {}
        if mapping is None:
            return {}
        if not isinstance(mapping, dict):
            logger.warning("Plugin %s returned a non-dict from %s", plugin_name, hook_name)
            return {}
        return mapping

    @staticmethod
    def _register_one(
        register: Callable[[str, Any], None], key: str, value: Any, plugin_name: str
    ) -> bool:
        try:
            register(key, value)
        except (TypeError, ValueError):
            logger.warning(
                "Skipping registration %r from plugin %s", key, plugin_name, exc_info=True
            )
            return False
        return True

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether *cls* has any ``@hookimpl`` methods.

        ``HookimplMarker("gormlint")`` sets a ``gormlint_impl`` attribute.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, f"{PROJECT_NAME}_impl", None):
                return True
        return False
