"""Shared pytest fixtures for the gush test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from gush.config import Config
from gush.platform.interfaces import Issue, PullRequest, Release
from gush.platform.registry import AdapterRegistry

GUSH_FILE = """\
parameters:
    cache-dir: /home/cordoval/.gush/cache
    adapters:
        github:
            config: { base_url: 'https://api.github.com/', repo_domain_url: 'https://github.com' }
            adapter_class: gush.adapters.github:GitHubAdapter
            authentication: { username: cordoval, password-or-token: password, http-auth-type: http_password }
    home: /home/cordoval/.gush
    adapter: github
    versioneye-token: NO_TOKEN
"""


class FakeAdapter:
    """In-memory adapter satisfying the Adapter contract."""

    name = "github"

    def __init__(self, config: Config) -> None:
        self.config = config
        self.authenticate_calls = 0
        self.closed = False
        self.issues = [
            Issue(number=1, title="Crash on start", author="alice", labels=["bug"]),
            Issue(number=2, title="Add dark mode", author="bob", assignee="carol"),
        ]

    def authenticate(self) -> None:
        self.authenticate_calls += 1

    def get_issues(self, org: str, repo: str) -> list[Issue]:
        return list(self.issues)

    def get_issue(self, org: str, repo: str, number: int) -> Issue:
        return next(i for i in self.issues if i.number == number)

    def open_issue(self, org: str, repo: str, title: str, body: str = "") -> Issue:
        issue = Issue(number=len(self.issues) + 1, title=title, body=body)
        self.issues.append(issue)
        return issue

    def close_issue(self, org: str, repo: str, number: int) -> Issue:
        issue = self.get_issue(org, repo, number)
        issue.state = "closed"
        return issue

    def get_pull_requests(self, org: str, repo: str) -> list[PullRequest]:
        return [PullRequest(number=7, title="Fix typo", author="dave", head="dave:typo", base="main")]

    def get_releases(self, org: str, repo: str) -> list[Release]:
        return [Release(id="10", tag_name="v1.0.0", name="First")]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_adapter_class() -> type:
    """A fresh FakeAdapter subclass recording every instance it builds."""

    class RecordingAdapter(FakeAdapter):
        built: list[FakeAdapter] = []

        def __init__(self, config: Config) -> None:
            super().__init__(config)
            type(self).built.append(self)

    return RecordingAdapter


@pytest.fixture()
def fake_registry(fake_adapter_class: type) -> AdapterRegistry:
    registry = AdapterRegistry()
    registry.register(fake_adapter_class)
    return registry


@pytest.fixture()
def github_tree() -> dict[str, Any]:
    """Configuration tree selecting the github adapter."""
    return {
        "cache-dir": "/tmp/gush/cache",
        "adapter": "github",
        "adapters": {
            "github": {
                "config": {
                    "base_url": "https://api.github.com/",
                    "repo_domain_url": "https://github.com",
                },
                "authentication": {
                    "username": "cordoval",
                    "password-or-token": "password",
                    "http-auth-type": "http_password",
                },
            }
        },
    }


@pytest.fixture()
def gush_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated GUSH_HOME holding the sample configuration file."""
    home = tmp_path / "home"
    home.mkdir()
    (home / ".gush.yml").write_text(GUSH_FILE)
    monkeypatch.setenv("GUSH_HOME", str(home))
    return home


@pytest.fixture()
def write_yaml() -> Any:
    """Factory writing a mapping as YAML to a path."""

    def _write(path: Path, data: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data))
        return path

    return _write
