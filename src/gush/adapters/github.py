"""GitHub adapter (REST API v3)."""

from __future__ import annotations

from typing import Any

from ..platform.interfaces import Issue, PullRequest, Release
from .base import BaseAdapter

GITHUB_API = "https://api.github.com"


class GitHubAdapter(BaseAdapter):
    """Adapter for github.com."""

    name = "github"
    default_base_url = GITHUB_API
    default_repo_domain_url = "https://github.com"
    default_headers = {"Accept": "application/vnd.github.v3+json", "User-Agent": "gush"}

    def auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"token {self.secret}"}

    def get_issues(self, org: str, repo: str) -> list[Issue]:
        items = self.paginate(f"/repos/{org}/{repo}/issues", params={"state": "open"})
        # The issues endpoint also lists pull requests.
        return [self._issue(item) for item in items if "pull_request" not in item]

    def get_issue(self, org: str, repo: str, number: int) -> Issue:
        return self._issue(self.request("GET", f"/repos/{org}/{repo}/issues/{number}"))

    def open_issue(self, org: str, repo: str, title: str, body: str = "") -> Issue:
        data = self.request(
            "POST", f"/repos/{org}/{repo}/issues", json={"title": title, "body": body}
        )
        return self._issue(data)

    def close_issue(self, org: str, repo: str, number: int) -> Issue:
        data = self.request(
            "PATCH", f"/repos/{org}/{repo}/issues/{number}", json={"state": "closed"}
        )
        return self._issue(data)

    def get_pull_requests(self, org: str, repo: str) -> list[PullRequest]:
        items = self.paginate(f"/repos/{org}/{repo}/pulls", params={"state": "open"})
        return [self._pull_request(item) for item in items]

    def get_releases(self, org: str, repo: str) -> list[Release]:
        items = self.paginate(f"/repos/{org}/{repo}/releases")
        return [self._release(item) for item in items]

    @staticmethod
    def _issue(data: dict[str, Any]) -> Issue:
        return Issue(
            number=data["number"],
            title=data.get("title", ""),
            body=data.get("body") or "",
            state=data.get("state", "open"),
            author=(data.get("user") or {}).get("login", "unknown"),
            url=data.get("html_url", ""),
            labels=[lbl.get("name", "") for lbl in data.get("labels", [])],
            assignee=(data.get("assignee") or {}).get("login"),
            created_at=data.get("created_at", ""),
        )

    @staticmethod
    def _pull_request(data: dict[str, Any]) -> PullRequest:
        return PullRequest(
            number=data["number"],
            title=data.get("title", ""),
            body=data.get("body") or "",
            state=data.get("state", "open"),
            author=(data.get("user") or {}).get("login", "unknown"),
            url=data.get("html_url", ""),
            head=(data.get("head") or {}).get("label", ""),
            base=(data.get("base") or {}).get("ref", ""),
            created_at=data.get("created_at", ""),
        )

    @staticmethod
    def _release(data: dict[str, Any]) -> Release:
        return Release(
            id=str(data["id"]),
            tag_name=data.get("tag_name", ""),
            name=data.get("name") or "",
            url=data.get("html_url", ""),
            draft=bool(data.get("draft")),
            prerelease=bool(data.get("prerelease")),
            created_at=data.get("created_at", ""),
        )
