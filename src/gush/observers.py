"""Definition observers.

Observers run once per command as it is added to the ``gush`` group and
may extend the command's parameters. Commands opt in by declaring
features with :func:`features`.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol

import click

from .helpers import GitHelper, TableHelper
from .platform.runtime import Runtime

FEATURES_ATTR = "__gush_features__"


def features(*names: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark a command callback as wanting the options of the named features."""

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, FEATURES_ATTR, frozenset(names))
        return func

    return decorator


def command_features(command: click.Command) -> frozenset[str]:
    return getattr(command.callback, FEATURES_ATTR, frozenset())


class DefinitionObserver(Protocol):
    def decorate(self, command: click.Command) -> None: ...


class TableObserver:
    """Adds ``--table-layout`` to commands with the ``table`` feature."""

    feature = "table"

    def decorate(self, command: click.Command) -> None:
        if self.feature not in command_features(command):
            return
        command.params.append(
            click.Option(
                ["--table-layout"],
                type=click.Choice(TableHelper.LAYOUTS),
                default="default",
                show_default=True,
                help="Table layout for the output.",
            )
        )


class RepositoryObserver:
    """Adds ``--org`` and ``--repo`` to commands with the ``repository`` feature.

    Both default to the path of the ``origin`` remote, read through the
    invocation runtime's ``git`` helper when there is one.
    """

    feature = "repository"

    def __init__(self, git: GitHelper | None = None) -> None:
        self.git = git or GitHelper()

    def _git(self) -> GitHelper:
        ctx = click.get_current_context(silent=True)
        runtime = ctx.find_object(Runtime) if ctx is not None else None
        if runtime is not None and "git" in runtime.helpers:
            return runtime.helpers["git"]
        return self.git

    def _default(self, index: int) -> Callable[[], str | None]:
        def default() -> str | None:
            repository = self._git().get_repository()
            return repository[index] if repository else None

        return default

    def decorate(self, command: click.Command) -> None:
        if self.feature not in command_features(command):
            return
        command.params.append(
            click.Option(
                ["--org"],
                default=self._default(0),
                help="Organization or owner. Default: from the origin remote",
            )
        )
        command.params.append(
            click.Option(
                ["--repo"],
                default=self._default(1),
                help="Repository name. Default: from the origin remote",
            )
        )
