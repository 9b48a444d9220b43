"""Bitbucket Cloud adapter (API 2.0).

Bitbucket has no releases; tags are reported in their place.
"""

from __future__ import annotations

from typing import Any

from ..platform.interfaces import Issue, PullRequest, Release
from .base import BaseAdapter

BITBUCKET_API = "https://api.bitbucket.org/2.0"

OPEN_ISSUE_QUERY = 'state="new" OR state="open"'


class BitbucketAdapter(BaseAdapter):
    """Adapter for bitbucket.org."""

    name = "bitbucket"
    default_base_url = BITBUCKET_API
    default_repo_domain_url = "https://bitbucket.org"

    def username_from(self, user: dict[str, Any]) -> str | None:
        return user.get("username") or user.get("nickname")

    def paginate(self, path: str, params: dict[str, Any] | None = None, limit: int = 1000) -> list[Any]:
        """Follow the ``next`` links of a Bitbucket paged collection."""
        items: list[Any] = []
        page = self.request("GET", path, params={**(params or {}), "pagelen": 50})
        while page and len(items) < limit:
            items.extend(page.get("values", []))
            next_url = page.get("next")
            if not next_url:
                break
            page = self.request("GET", next_url)
        return items[:limit]

    def get_issues(self, org: str, repo: str) -> list[Issue]:
        items = self.paginate(
            f"/repositories/{org}/{repo}/issues", params={"q": OPEN_ISSUE_QUERY}
        )
        return [self._issue(item) for item in items]

    def get_issue(self, org: str, repo: str, number: int) -> Issue:
        return self._issue(self.request("GET", f"/repositories/{org}/{repo}/issues/{number}"))

    def open_issue(self, org: str, repo: str, title: str, body: str = "") -> Issue:
        data = self.request(
            "POST",
            f"/repositories/{org}/{repo}/issues",
            json={"title": title, "content": {"raw": body}},
        )
        return self._issue(data)

    def close_issue(self, org: str, repo: str, number: int) -> Issue:
        data = self.request(
            "PUT", f"/repositories/{org}/{repo}/issues/{number}", json={"state": "resolved"}
        )
        return self._issue(data)

    def get_pull_requests(self, org: str, repo: str) -> list[PullRequest]:
        items = self.paginate(
            f"/repositories/{org}/{repo}/pullrequests", params={"state": "OPEN"}
        )
        return [self._pull_request(item) for item in items]

    def get_releases(self, org: str, repo: str) -> list[Release]:
        items = self.paginate(
            f"/repositories/{org}/{repo}/refs/tags", params={"sort": "-target.date"}
        )
        return [self._release(item) for item in items]

    @staticmethod
    def _user(data: dict[str, Any] | None) -> str | None:
        if not data:
            return None
        return data.get("nickname") or data.get("display_name")

    @staticmethod
    def _html_url(data: dict[str, Any]) -> str:
        return ((data.get("links") or {}).get("html") or {}).get("href", "")

    def _issue(self, data: dict[str, Any]) -> Issue:
        return Issue(
            number=data["id"],
            title=data.get("title", ""),
            body=(data.get("content") or {}).get("raw") or "",
            state=data.get("state", "new"),
            author=self._user(data.get("reporter")) or "unknown",
            url=self._html_url(data),
            labels=[data["kind"]] if data.get("kind") else [],
            assignee=self._user(data.get("assignee")),
            created_at=data.get("created_on", ""),
        )

    def _pull_request(self, data: dict[str, Any]) -> PullRequest:
        return PullRequest(
            number=data["id"],
            title=data.get("title", ""),
            body=data.get("description") or "",
            state=str(data.get("state", "OPEN")).lower(),
            author=self._user(data.get("author")) or "unknown",
            url=self._html_url(data),
            head=((data.get("source") or {}).get("branch") or {}).get("name", ""),
            base=((data.get("destination") or {}).get("branch") or {}).get("name", ""),
            created_at=data.get("created_on", ""),
        )

    def _release(self, data: dict[str, Any]) -> Release:
        return Release(
            id=data["name"],
            tag_name=data["name"],
            name=data["name"],
            url=self._html_url(data),
            created_at=(data.get("target") or {}).get("date", ""),
        )
