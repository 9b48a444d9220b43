"""GitLab adapter (REST API v4). Pull requests are merge requests."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from ..platform.interfaces import Issue, PullRequest, Release
from .base import HTTP_TOKEN, BaseAdapter

GITLAB_API = "https://gitlab.com/api/v4"


def project_path(org: str, repo: str) -> str:
    """URL-encoded ``org/repo``, GitLab's project identifier."""
    return quote(f"{org}/{repo}", safe="")


class GitLabAdapter(BaseAdapter):
    """Adapter for gitlab.com and self-hosted GitLab."""

    name = "gitlab"
    default_base_url = GITLAB_API
    default_repo_domain_url = "https://gitlab.com"

    @property
    def auth_type(self) -> str:
        # GitLab authenticates API calls with a private token only.
        return HTTP_TOKEN

    def auth_headers(self) -> dict[str, str]:
        return {"PRIVATE-TOKEN": self.secret}

    def username_from(self, user: dict[str, Any]) -> str | None:
        return user.get("username")

    def get_issues(self, org: str, repo: str) -> list[Issue]:
        items = self.paginate(
            f"/projects/{project_path(org, repo)}/issues", params={"state": "opened"}
        )
        return [self._issue(item) for item in items]

    def get_issue(self, org: str, repo: str, number: int) -> Issue:
        return self._issue(
            self.request("GET", f"/projects/{project_path(org, repo)}/issues/{number}")
        )

    def open_issue(self, org: str, repo: str, title: str, body: str = "") -> Issue:
        data = self.request(
            "POST",
            f"/projects/{project_path(org, repo)}/issues",
            json={"title": title, "description": body},
        )
        return self._issue(data)

    def close_issue(self, org: str, repo: str, number: int) -> Issue:
        data = self.request(
            "PUT",
            f"/projects/{project_path(org, repo)}/issues/{number}",
            json={"state_event": "close"},
        )
        return self._issue(data)

    def get_pull_requests(self, org: str, repo: str) -> list[PullRequest]:
        items = self.paginate(
            f"/projects/{project_path(org, repo)}/merge_requests", params={"state": "opened"}
        )
        return [self._merge_request(item) for item in items]

    def get_releases(self, org: str, repo: str) -> list[Release]:
        items = self.paginate(f"/projects/{project_path(org, repo)}/releases")
        return [self._release(item) for item in items]

    @staticmethod
    def _issue(data: dict[str, Any]) -> Issue:
        return Issue(
            number=data["iid"],
            title=data.get("title", ""),
            body=data.get("description") or "",
            state=data.get("state", "opened"),
            author=(data.get("author") or {}).get("username", "unknown"),
            url=data.get("web_url", ""),
            labels=list(data.get("labels", [])),
            assignee=(data.get("assignee") or {}).get("username"),
            created_at=data.get("created_at", ""),
        )

    @staticmethod
    def _merge_request(data: dict[str, Any]) -> PullRequest:
        return PullRequest(
            number=data["iid"],
            title=data.get("title", ""),
            body=data.get("description") or "",
            state=data.get("state", "opened"),
            author=(data.get("author") or {}).get("username", "unknown"),
            url=data.get("web_url", ""),
            head=data.get("source_branch", ""),
            base=data.get("target_branch", ""),
            created_at=data.get("created_at", ""),
        )

    @staticmethod
    def _release(data: dict[str, Any]) -> Release:
        return Release(
            id=data["tag_name"],
            tag_name=data["tag_name"],
            name=data.get("name") or "",
            url=(data.get("_links") or {}).get("self", ""),
            prerelease=bool(data.get("upcoming_release")),
            created_at=data.get("created_at", ""),
        )
