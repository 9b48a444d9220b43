"""Adapter contract and the provider-neutral records adapters return.

Every command talks to the hosting provider through an object that
satisfies :class:`Adapter`, so the same command runs unchanged against
GitHub, GitHub Enterprise, Bitbucket or GitLab.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..config import Config


@dataclass
class Issue:
    """An issue as seen by every provider."""

    number: int
    title: str
    body: str = ""
    state: str = "open"
    author: str = ""
    url: str = ""
    labels: list[str] = field(default_factory=list)
    assignee: str | None = None
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)


@dataclass
class PullRequest:
    """A pull (or merge) request."""

    number: int
    title: str
    body: str = ""
    state: str = "open"
    author: str = ""
    url: str = ""
    head: str = ""
    base: str = ""
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)


@dataclass
class Release:
    """A published or draft release."""

    id: str
    tag_name: str
    name: str = ""
    url: str = ""
    draft: bool = False
    prerelease: bool = False
    created_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)


@runtime_checkable
class Adapter(Protocol):
    """Capability contract binding gush to one hosting provider.

    Implementations are constructed with a single :class:`~gush.config.Config`
    in the reshaped layout: the provider settings live under the key
    equal to :attr:`name` and the credentials under ``authentication``.
    """

    name: ClassVar[str]

    def __init__(self, config: Config) -> None: ...

    def authenticate(self) -> None:
        """Verify the configured credentials.

        Raises:
            AuthError: If the provider rejects them.
        """
        ...

    def get_issues(self, org: str, repo: str) -> list[Issue]:
        """List the open issues of ``org/repo``."""
        ...

    def get_issue(self, org: str, repo: str, number: int) -> Issue:
        """Fetch a single issue."""
        ...

    def open_issue(self, org: str, repo: str, title: str, body: str = "") -> Issue:
        """Create an issue and return it."""
        ...

    def close_issue(self, org: str, repo: str, number: int) -> Issue:
        """Close an issue and return its new state."""
        ...

    def get_pull_requests(self, org: str, repo: str) -> list[PullRequest]:
        """List the open pull requests of ``org/repo``."""
        ...

    def get_releases(self, org: str, repo: str) -> list[Release]:
        """List the releases of ``org/repo``, newest first."""
        ...

    def close(self) -> None:
        """Release network resources."""
        ...


# Members a class must provide as callables to pass registry validation.
ADAPTER_METHODS: tuple[str, ...] = (
    "authenticate",
    "get_issues",
    "get_issue",
    "open_issue",
    "close_issue",
    "get_pull_requests",
    "get_releases",
    "close",
)
