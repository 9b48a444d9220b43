"""Provider-adapter resolution and runtime lifecycle."""

from __future__ import annotations

from .builder import build_adapter, reshape_for_adapter
from .detector import detect_provider, provider_from_url
from .interfaces import Adapter, Issue, PullRequest, Release
from .registry import AdapterRegistry, default_registry
from .runtime import GushCommand, GushGroup, Runtime, RuntimeState

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "GushCommand",
    "GushGroup",
    "Issue",
    "PullRequest",
    "Release",
    "Runtime",
    "RuntimeState",
    "build_adapter",
    "default_registry",
    "detect_provider",
    "provider_from_url",
    "reshape_for_adapter",
]
