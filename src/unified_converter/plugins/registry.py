"""Conversion registry mapping format pairs to plugins, plus discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType

from unified_converter.errors import PluginError
from unified_converter.plugins.base import ConverterPlugin
from unified_converter.plugins.builtins import BUILTIN_PLUGINS
from unified_converter.types import ConversionKey, FormatTag

logger = logging.getLogger(__name__)


class ConversionRegistry:
    """Registry binding each ``(source, target)`` pair to one plugin.

    Notes
    -----
    Registration is expected to happen once at startup. Writes are
    serialized; lookups read the binding dict without locking.
    Re-registering a pair overwrites the previous binding
    (last-registered wins).
    """

    def __init__(self) -> None:
        self._bindings: dict[ConversionKey, ConverterPlugin] = {}
        self._conversions: list[ConversionKey] = []
        self._write_lock = threading.Lock()

    def register(self, plugin: ConverterPlugin) -> None:
        """Bind every pair the plugin supports.

        Every ordered pair of distinct convertible formats is probed with
        ``plugin.supports``. Registering the same plugin twice records its
        pairs twice in :meth:`supported_conversions`.

        Parameters
        ----------
        plugin : ConverterPlugin
            Plugin instance to register.

        Raises
        ------
        PluginError
            If plugin does not provide a valid name.
        """
        name = str(getattr(plugin, "name", "") or "").strip()
        if not name:
            raise PluginError("Plugin must define a non-empty 'name'.")

        formats = FormatTag.convertible()
        with self._write_lock:
            for source in formats:
                for target in formats:
                    if source is target or not plugin.supports(source, target):
                        continue
                    key = ConversionKey(source, target)
                    previous = self._bindings.get(key)
                    if previous is not None and previous is not plugin:
                        logger.debug(
                            "Rebinding %s from '%s' to '%s'.", key, previous.name, name
                        )
                    self._bindings[key] = plugin
                    self._conversions.append(key)

    def lookup(self, source: FormatTag, target: FormatTag) -> ConverterPlugin | None:
        """Return the plugin bound to the pair, or ``None``."""
        if source is target:
            return None
        return self._bindings.get(ConversionKey(source, target))

    def is_supported(self, source: FormatTag, target: FormatTag) -> bool:
        """Return whether a plugin is bound to the pair."""
        return self.lookup(source, target) is not None

    def supported_sources(self) -> set[FormatTag]:
        """Return formats appearing as the source of any binding."""
        return {key.source for key in list(self._bindings)}

    def supported_targets(self, source: FormatTag) -> set[FormatTag]:
        """Return formats reachable from ``source``."""
        return {key.target for key in list(self._bindings) if key.source is source}

    def supported_conversions(self) -> list[ConversionKey]:
        """Return recorded conversions in registration order.

        Returns
        -------
        list[ConversionKey]
            Copy of the recorded pairs; duplicates are kept.
        """
        return list(self._conversions)

    def plugins(self) -> list[ConverterPlugin]:
        """Return distinct bound plugins in first-binding order."""
        seen: dict[int, ConverterPlugin] = {}
        for plugin in list(self._bindings.values()):
            seen.setdefault(id(plugin), plugin)
        return list(seen.values())

    def load_module(self, module_or_path: str) -> list[ConversionKey]:
        """Load a plugin module and bind the pairs its plugins support.

        .. warning::
            This method executes code from the specified module. Only load plugins
            from trusted sources.

        Parameters
        ----------
        module_or_path : str
            Python import path or path to a ``.py`` file.

        Returns
        -------
        list[ConversionKey]
            Pairs bound while registering the module's plugins, in order.

        Raises
        ------
        PluginError
            If the module cannot be loaded or exposes no plugins.
        """
        module = _load_plugin_module(module_or_path)
        already_bound = len(self._conversions)
        _bind_module_plugins(module, self)
        bound = self._conversions[already_bound:]
        if bound:
            logger.info(
                "Plugin module %s bound %s.",
                module_or_path,
                ", ".join(str(key) for key in bound),
            )
        else:
            logger.warning("Plugin module %s bound no conversions.", module_or_path)
        return bound


def _load_plugin_module(module_or_path: str) -> ModuleType:
    """Import a plugin module from an import path or a ``.py`` file.

    File modules get a private module name so they never shadow an
    installed package of the same stem.

    Raises
    ------
    PluginError
        If the file cannot be executed or the import path cannot be imported.
    """
    candidate = Path(module_or_path)
    if candidate.suffix == ".py" or candidate.is_file():
        spec = importlib.util.spec_from_file_location(
            f"_unified_converter_plugin_{candidate.stem}", candidate
        )
        if spec is None or spec.loader is None:
            raise PluginError(f"Unable to load plugin module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise PluginError(
                f"Unable to load plugin module from {candidate}: {exc}"
            ) from exc
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise PluginError(
            f"Unable to import plugin module '{module_or_path}': {exc}"
        ) from exc


def _bind_module_plugins(module: ModuleType, registry: ConversionRegistry) -> None:
    """Register a module's plugins through the first contract it exposes.

    ``register_plugins(registry)`` takes precedence over a ``PLUGINS``
    iterable, which takes precedence over a single ``PLUGIN``.
    """
    hook = getattr(module, "register_plugins", None)
    if callable(hook):
        hook(registry)
        return

    if getattr(module, "PLUGINS", None) is not None:
        plugins = list(module.PLUGINS)
    elif getattr(module, "PLUGIN", None) is not None:
        plugins = [module.PLUGIN]
    else:
        raise PluginError(
            "Plugin module must expose register_plugins(registry), PLUGINS, or PLUGIN."
        )
    for plugin in plugins:
        registry.register(plugin)


def create_default_registry(
    extra_modules: Iterable[str] | None = None,
) -> ConversionRegistry:
    """Create registry with built-in converters.

    Parameters
    ----------
    extra_modules : Iterable[str] | None, optional
        Additional plugin modules to load after the built-ins; their
        bindings take precedence on overlapping pairs.

    Returns
    -------
    ConversionRegistry
        Registry with built-in and external plugins.
    """
    registry = ConversionRegistry()
    for plugin_cls in BUILTIN_PLUGINS:
        registry.register(plugin_cls())
    for module in extra_modules or []:
        registry.load_module(module)
    return registry
