"""Per-invocation lifecycle.

The :class:`Runtime` is the context object of a ``gush`` invocation. It
loads the configuration, resolves and builds exactly one adapter,
wires output-aware helpers and then lets the command run. Tests and
embedding callers can hand it a prebuilt configuration or adapter.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any, Callable

import click
from rich.console import Console
from rich.markup import escape

from ..config import MISSING, Config, load_config
from ..errors import ConfigError, DetectionFailed, GushError
from ..helpers import GitHelper, OutputAware, TableHelper
from .builder import build_adapter
from .detector import detect_provider
from .interfaces import Adapter
from .registry import AdapterRegistry, default_registry

logger = logging.getLogger(__name__)

CONFIGURE_COMMAND = "core:configure"


class RuntimeState(enum.Enum):
    START = "start"
    CONFIG_LOADED = "config_loaded"
    ADAPTER_RESOLVING = "adapter_resolving"
    ADAPTER_READY = "adapter_ready"
    DISPATCHING = "dispatching"
    DONE = "done"
    CONFIG_ERROR = "config_error"
    DETECTION_FAILED = "detection_failed"
    ADAPTER_BUILD_ERROR = "adapter_build_error"


class Runtime:
    """Owns the configuration, the adapter and the helpers of one run.

    Args:
        registry: Adapter registry. Defaults to the built-in adapters.
        config: Preloaded configuration; loaded on first use otherwise.
        adapter: Prebuilt adapter; resolution is skipped when given.
        helpers: Helpers by name. Defaults to ``git`` and ``table``.
        console: Console handed to output-aware helpers.
        cwd: Working copy used for provider detection.
        config_loader: Callable returning the configuration.
        detector: Callable mapping ``cwd`` to a provider identifier.
    """

    def __init__(
        self,
        registry: AdapterRegistry | None = None,
        config: Config | None = None,
        adapter: Adapter | None = None,
        helpers: dict[str, Any] | None = None,
        console: Console | None = None,
        cwd: str | Path | None = None,
        config_loader: Callable[[], Config] = load_config,
        detector: Callable[[str | Path | None], str] = detect_provider,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.config = config
        self.adapter = adapter
        self.console = console or Console()
        self.cwd = cwd
        self.helpers: dict[str, Any] = (
            helpers if helpers is not None else {"git": GitHelper(cwd), "table": TableHelper()}
        )
        self.state = RuntimeState.START
        self._config_loader = config_loader
        self._detector = detector
        self._owns_adapter = False

    def load_config(self) -> Config:
        """Return the configuration, loading it on first use."""
        if self.config is None:
            try:
                self.config = self._config_loader()
            except ConfigError:
                self.state = RuntimeState.CONFIG_ERROR
                raise
        if self.state is RuntimeState.START:
            self.state = RuntimeState.CONFIG_LOADED
        return self.config

    def resolve_identifier(self) -> str:
        """Return the configured ``adapter``, or detect it from the remote."""
        config = self.load_config()
        identifier = config.get("adapter")
        if identifier is not MISSING and identifier:
            return str(identifier)
        try:
            return self._detector(self.cwd)
        except DetectionFailed:
            self.state = RuntimeState.DETECTION_FAILED
            raise

    def resolve_adapter(self) -> Adapter:
        """Return the bound adapter, building it on first call."""
        if self.adapter is not None:
            return self.adapter

        config = self.load_config()
        self.state = RuntimeState.ADAPTER_RESOLVING
        self.registry.freeze()
        identifier = self.resolve_identifier()
        logger.debug("Resolved adapter %r", identifier)
        try:
            adapter = build_adapter(identifier, config, self.registry)
        except GushError:
            self.state = RuntimeState.ADAPTER_BUILD_ERROR
            raise
        self.adapter = adapter
        self._owns_adapter = True
        self.state = RuntimeState.ADAPTER_READY
        return adapter

    def wire_helpers(self) -> None:
        for helper in self.helpers.values():
            if isinstance(helper, OutputAware):
                helper.set_console(self.console)

    def helper(self, name: str) -> Any:
        try:
            return self.helpers[name]
        except KeyError:
            raise KeyError(f"No helper named '{name}'") from None

    def prepare(self, command_name: str | None) -> None:
        """Bring the runtime to the point where ``command_name`` can run.

        The configure command skips configuration and adapter resolution.
        """
        if command_name != CONFIGURE_COMMAND:
            self.load_config()
            self.resolve_adapter()
            self.state = RuntimeState.ADAPTER_READY
        self.wire_helpers()
        self.state = RuntimeState.DISPATCHING

    def finish(self) -> None:
        self.state = RuntimeState.DONE

    def close(self) -> None:
        """Close the adapter if this runtime built it."""
        if self.adapter is not None and self._owns_adapter:
            self.adapter.close()


pass_runtime = click.make_pass_decorator(Runtime, ensure=True)


class GushCommand(click.Command):
    """Command that runs the runtime lifecycle before its callback."""

    def invoke(self, ctx: click.Context) -> Any:
        runtime = ctx.ensure_object(Runtime)
        try:
            runtime.prepare(self.name)
            result = super().invoke(ctx)
        except GushError as exc:
            logger.debug("Aborting %s", self.name, exc_info=True)
            runtime.console.print(f"[red]✗ {escape(str(exc))}", soft_wrap=True)
            ctx.exit(1)
        runtime.finish()
        return result


class GushGroup(click.Group):
    """Group that lets definition observers decorate each added command."""

    command_class = GushCommand

    def __init__(self, *args: Any, observers: list[Any] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.observers: list[Any] = list(observers or [])

    def add_command(self, cmd: click.Command, name: str | None = None) -> None:
        for observer in self.observers:
            observer.decorate(cmd)
        super().add_command(cmd, name)
