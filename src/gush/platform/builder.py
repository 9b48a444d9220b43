"""Construct and authenticate the adapter for a provider identifier."""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..config import MISSING, Config
from ..errors import AdapterBuildError
from .interfaces import Adapter
from .registry import AdapterRegistry

logger = logging.getLogger(__name__)


def reshape_for_adapter(tree: dict[str, Any], identifier: str) -> dict[str, Any]:
    """Flatten the configuration tree for one provider.

    Adapters read their settings from a flat, provider-keyed layout::

        adapter: github
        github: {base_url: ...}
        authentication: {username: ...}

    whereas configuration files nest them under ``adapters.<identifier>``.
    The ``adapters`` collection itself is dropped from the result and
    ``tree`` is left untouched.

    Args:
        tree: Full configuration tree.
        identifier: Selected provider identifier.

    Returns:
        A new tree in the flat layout.
    """
    settings = (tree.get("adapters") or {}).get(identifier) or {}
    reshaped = {key: copy.deepcopy(value) for key, value in tree.items() if key != "adapters"}
    reshaped["adapter"] = identifier
    reshaped[identifier] = copy.deepcopy(settings.get("config"))
    reshaped["authentication"] = copy.deepcopy(settings.get("authentication"))
    return reshaped


def select_adapter_class(
    identifier: str, config: Config, registry: AdapterRegistry
) -> type:
    """Pick the class for ``identifier``.

    A configured ``adapters.<identifier>.adapter_class`` wins over the
    registry entry and is validated the same way registered handles are.

    Raises:
        AdapterBuildError: If neither source names a class.
        UnknownAdapter: If the configured class does not exist.
        InvalidAdapter: If the configured class breaks the contract.
    """
    configured = config.get(f"[adapters][{identifier}][adapter_class]")
    if configured is not MISSING and configured:
        return registry.validate(configured)

    adapter_class = registry.lookup(identifier)
    if adapter_class is None:
        available = ", ".join(registry.names()) or "(none)"
        raise AdapterBuildError(
            f"No adapter is registered for '{identifier}'. Available: {available}"
        )
    return adapter_class


def build_adapter(identifier: str, config: Config, registry: AdapterRegistry) -> Adapter:
    """Construct and authenticate the adapter for ``identifier``.

    Records ``adapter: <identifier>`` in ``config`` once the class and
    its settings are known.

    Args:
        identifier: Resolved provider identifier.
        config: Loaded configuration store.
        registry: Registry of available adapter classes.

    Returns:
        The authenticated adapter.

    Raises:
        AdapterBuildError: If the provider is unknown or unconfigured.
        AuthError: Propagated from the adapter's ``authenticate()``.
    """
    adapter_class = select_adapter_class(identifier, config, registry)

    if config.get(f"[adapters][{identifier}][config]") is MISSING:
        raise AdapterBuildError(
            f"The '{identifier}' adapter is not configured "
            f"(missing adapters.{identifier}.config). "
            "Please run the core:configure command"
        )

    config.merge({"adapter": identifier})
    adapter = adapter_class(Config(reshape_for_adapter(config.raw(), identifier)))
    logger.debug("Authenticating %s adapter", identifier)
    try:
        adapter.authenticate()
    except BaseException:
        adapter.close()
        raise
    return adapter
