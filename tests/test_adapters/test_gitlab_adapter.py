"""Tests for the GitLab adapter."""

from __future__ import annotations

import json

import httpx
import pytest
import respx

from gush.adapters.gitlab import GITLAB_API, GitLabAdapter, project_path
from gush.config import Config
from gush.errors import AuthError
from gush.platform.builder import reshape_for_adapter

PROJECT = f"{GITLAB_API}/projects/gushphp%2Fgush"


@pytest.fixture()
def adapter() -> GitLabAdapter:
    tree = {
        "adapters": {
            "gitlab": {
                "config": {"base_url": GITLAB_API},
                # http_password is ignored; GitLab always uses the private token.
                "authentication": {
                    "username": "cordoval",
                    "password-or-token": "glpat-123",
                    "http-auth-type": "http_password",
                },
            }
        }
    }
    return GitLabAdapter(Config(reshape_for_adapter(tree, "gitlab")))


def test_project_path_is_url_encoded() -> None:
    assert project_path("group/sub", "repo") == "group%2Fsub%2Frepo"


class TestAuthenticate:
    @respx.mock
    def test_private_token_header(self, adapter: GitLabAdapter) -> None:
        route = respx.get(f"{GITLAB_API}/user").mock(
            return_value=httpx.Response(200, json={"username": "cordoval"})
        )
        adapter.authenticate()
        request = route.calls.last.request
        assert request.headers["PRIVATE-TOKEN"] == "glpat-123"
        assert "Authorization" not in request.headers
        assert adapter.username == "cordoval"

    @respx.mock
    def test_unauthorized(self, adapter: GitLabAdapter) -> None:
        respx.get(f"{GITLAB_API}/user").mock(
            return_value=httpx.Response(401, json={"message": "401 Unauthorized"})
        )
        with pytest.raises(AuthError):
            adapter.authenticate()


class TestIssues:
    @respx.mock
    def test_get_issues(self, adapter: GitLabAdapter) -> None:
        route = respx.get(f"{PROJECT}/issues").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "iid": 12,
                        "title": "Broken",
                        "state": "opened",
                        "author": {"username": "alice"},
                        "assignee": {"username": "carol"},
                        "labels": ["bug", "p1"],
                        "web_url": "https://gitlab.com/gushphp/gush/-/issues/12",
                    }
                ],
            )
        )
        (issue,) = adapter.get_issues("gushphp", "gush")
        assert issue.number == 12
        assert issue.labels == ["bug", "p1"]
        assert issue.assignee == "carol"
        assert b"gushphp%2Fgush" in route.calls.last.request.url.raw_path
        assert route.calls.last.request.url.params["state"] == "opened"

    @respx.mock
    def test_close_issue(self, adapter: GitLabAdapter) -> None:
        route = respx.put(f"{PROJECT}/issues/12").mock(
            return_value=httpx.Response(200, json={"iid": 12, "state": "closed"})
        )
        assert adapter.close_issue("gushphp", "gush", 12).state == "closed"
        assert json.loads(route.calls.last.request.content) == {"state_event": "close"}


class TestMergeRequestsAndReleases:
    @respx.mock
    def test_merge_requests(self, adapter: GitLabAdapter) -> None:
        respx.get(f"{PROJECT}/merge_requests").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "iid": 4,
                        "title": "Refactor",
                        "author": {"username": "bob"},
                        "source_branch": "refactor",
                        "target_branch": "main",
                    }
                ],
            )
        )
        (pr,) = adapter.get_pull_requests("gushphp", "gush")
        assert pr.number == 4
        assert (pr.head, pr.base) == ("refactor", "main")

    @respx.mock
    def test_releases(self, adapter: GitLabAdapter) -> None:
        respx.get(f"{PROJECT}/releases").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {
                        "tag_name": "v3.1",
                        "name": "Spring",
                        "upcoming_release": True,
                        "_links": {"self": "https://gitlab.com/gushphp/gush/-/releases/v3.1"},
                    }
                ],
            )
        )
        (release,) = adapter.get_releases("gushphp", "gush")
        assert release.id == "v3.1"
        assert release.prerelease is True
        assert release.url.endswith("/releases/v3.1")
