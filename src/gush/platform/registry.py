"""Adapter registry for provider discovery and lookup.

Maps provider identifiers (``github``, ``gitlab``...) to adapter classes.
Every handle is validated against the Adapter contract before it is
stored, so a broken third-party adapter fails at registration rather
than in the middle of a command.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from typing import Union

from ..errors import InvalidAdapter, UnknownAdapter
from .interfaces import ADAPTER_METHODS

logger = logging.getLogger(__name__)

AdapterHandle = Union[type, str]

BUILTIN_ADAPTERS: tuple[str, ...] = (
    "gush.adapters.github:GitHubAdapter",
    "gush.adapters.github_enterprise:GitHubEnterpriseAdapter",
    "gush.adapters.bitbucket:BitbucketAdapter",
    "gush.adapters.gitlab:GitLabAdapter",
)


def resolve_handle(handle: AdapterHandle) -> type:
    """Turn a class or an import string into a concrete class.

    Import strings take the form ``package.module:Class`` or
    ``package.module.Class``.

    Raises:
        UnknownAdapter: If the handle does not name an instantiable class.
    """
    if isinstance(handle, str):
        module_name, sep, attr = handle.partition(":")
        if not sep:
            module_name, _, attr = handle.rpartition(".")
        if not module_name or not attr:
            raise UnknownAdapter(f'The adapter class "{handle}" doesn\'t exist.')
        try:
            module = importlib.import_module(module_name)
            target = getattr(module, attr)
        except (ImportError, AttributeError) as exc:
            raise UnknownAdapter(
                f'The adapter class "{handle}" doesn\'t exist.'
            ) from exc
    else:
        target = handle

    if not inspect.isclass(target) or inspect.isabstract(target):
        raise UnknownAdapter(f'The adapter class "{handle}" is not instantiable.')
    return target


class AdapterRegistry:
    """Registry mapping provider identifiers to validated adapter classes."""

    def __init__(self) -> None:
        self._adapters: dict[str, type] = {}
        self._frozen = False

    def validate(self, handle: AdapterHandle) -> type:
        """Check ``handle`` against the Adapter contract without storing it.

        Args:
            handle: Adapter class or import string.

        Returns:
            The resolved adapter class.

        Raises:
            UnknownAdapter: If the handle does not resolve to a concrete class.
            InvalidAdapter: If the class lacks contract members or a ``name``.
        """
        adapter_class = resolve_handle(handle)
        qualname = f"{adapter_class.__module__}.{adapter_class.__qualname__}"

        missing = [
            member
            for member in ADAPTER_METHODS
            if not callable(getattr(adapter_class, member, None))
        ]
        if missing:
            raise InvalidAdapter(
                f'The adapter class "{qualname}" does not implement the Adapter '
                f"contract (missing: {', '.join(missing)})"
            )

        name = getattr(adapter_class, "name", None)
        if not isinstance(name, str) or not name:
            raise InvalidAdapter(
                f'The adapter class "{qualname}" does not declare a provider name'
            )
        return adapter_class

    def register(self, handle: AdapterHandle) -> str:
        """Validate ``handle`` and store it under its declared name.

        Args:
            handle: Adapter class or import string.

        Returns:
            The provider identifier the class was registered under.

        Raises:
            UnknownAdapter: See :meth:`validate`.
            InvalidAdapter: See :meth:`validate`.
            RuntimeError: If the registry has been frozen.
        """
        if self._frozen:
            raise RuntimeError("The adapter registry is frozen; register adapters before resolution")
        adapter_class = self.validate(handle)
        name = adapter_class.name
        if name in self._adapters and self._adapters[name] is not adapter_class:
            logger.debug("Replacing adapter %r", name)
        self._adapters[name] = adapter_class
        return name

    def lookup(self, identifier: str) -> type | None:
        """Return the class registered for ``identifier``, if any."""
        return self._adapters.get(identifier)

    def get(self, identifier: str) -> type:
        """Look up an adapter class by provider identifier.

        Raises:
            UnknownAdapter: If the identifier is not registered.
        """
        if identifier not in self._adapters:
            available = ", ".join(self.names()) or "(none)"
            raise UnknownAdapter(
                f"Unknown adapter '{identifier}'. Available: {available}"
            )
        return self._adapters[identifier]

    def adapters(self) -> dict[str, type]:
        """Return a copy of the identifier-to-class mapping."""
        return dict(self._adapters)

    def names(self) -> list[str]:
        """Return all registered identifiers, sorted."""
        return sorted(self._adapters)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._adapters


def default_registry() -> AdapterRegistry:
    """Return a fresh registry holding the built-in adapters."""
    registry = AdapterRegistry()
    for handle in BUILTIN_ADAPTERS:
        registry.register(handle)
    return registry
