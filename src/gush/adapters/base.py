"""Shared HTTP plumbing for the built-in provider adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from ..config import Config
from ..errors import AdapterBuildError, AuthError, ProviderError
from ..platform.interfaces import Issue, PullRequest, Release

logger = logging.getLogger(__name__)

HTTP_PASSWORD = "http_password"
HTTP_TOKEN = "http_token"
DEFAULT_TIMEOUT = 30.0
PER_PAGE = 100


class BaseAdapter(ABC):
    """Base class for REST adapters.

    Reads its settings from the reshaped configuration: provider settings
    under ``config[<name>]`` and credentials under ``config["authentication"]``.
    """

    name: ClassVar[str] = ""
    default_base_url: ClassVar[str] = ""
    default_repo_domain_url: ClassVar[str] = ""
    user_endpoint: ClassVar[str] = "/user"
    default_headers: ClassVar[dict[str, str]] = {"Accept": "application/json", "User-Agent": "gush"}

    def __init__(self, config: Config) -> None:
        self.config = config
        self.settings: dict[str, Any] = config.get(self.name, None) or {}
        self.credentials: dict[str, Any] = config.get("authentication", None) or {}
        self.base_url = str(self.settings.get("base_url") or self.default_base_url).rstrip("/")
        if not self.base_url:
            raise AdapterBuildError(
                f"The '{self.name}' adapter needs adapters.{self.name}.config.base_url"
            )
        self.username: str | None = None
        self._client: httpx.Client | None = None

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    @property
    def auth_type(self) -> str:
        return str(self.credentials.get("http-auth-type") or HTTP_PASSWORD)

    @property
    def secret(self) -> str:
        return str(self.credentials.get("password-or-token") or "")

    def auth_headers(self) -> dict[str, str]:
        """Extra headers carrying a token, for token-based auth."""
        return {"Authorization": f"Bearer {self.secret}"}

    def build_client(self) -> httpx.Client:
        headers = dict(self.default_headers)
        auth: httpx.Auth | None = None
        if self.auth_type == HTTP_TOKEN:
            headers.update(self.auth_headers())
        else:
            auth = httpx.BasicAuth(str(self.credentials.get("username", "")), self.secret)
        return httpx.Client(
            base_url=self.base_url,
            headers=headers,
            auth=auth,
            timeout=DEFAULT_TIMEOUT,
        )

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = self.build_client()
        return self._client

    def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ProviderError: On transport failures and non-2xx responses.
        """
        try:
            resp = self.client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"{self.name}: {method} {path} failed with "
                f"{exc.response.status_code}: {_error_message(exc.response)}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"{self.name}: {method} {path} failed: {exc}") from exc
        if not resp.content:
            return None
        return resp.json()

    def paginate(self, path: str, params: dict[str, Any] | None = None, limit: int = 1000) -> list[Any]:
        """Collect a page-numbered collection until an empty or short page."""
        items: list[Any] = []
        page = 1
        while len(items) < limit:
            batch = self.request(
                "GET", path, params={**(params or {}), "per_page": PER_PAGE, "page": page}
            )
            if not batch:
                break
            items.extend(batch)
            if len(batch) < PER_PAGE:
                break
            page += 1
        return items[:limit]

    # ------------------------------------------------------------------
    # Adapter contract
    # ------------------------------------------------------------------

    def authenticate(self) -> None:
        """Check the credentials against the provider's user endpoint.

        Raises:
            AuthError: If no credentials are configured or they are rejected.
            ProviderError: If the provider cannot be reached.
        """
        if not self.credentials:
            raise AuthError(
                f"No credentials configured for '{self.name}' "
                f"(adapters.{self.name}.authentication)"
            )
        try:
            user = self.request("GET", self.user_endpoint)
        except ProviderError as exc:
            if exc.status_code in (401, 403):
                raise AuthError(
                    f"The {self.name} credentials were rejected: {exc}"
                ) from exc
            raise
        self.username = self.username_from(user or {})
        logger.debug("Authenticated against %s as %s", self.name, self.username)

    def username_from(self, user: dict[str, Any]) -> str | None:
        return user.get("login")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    @abstractmethod
    def get_issues(self, org: str, repo: str) -> list[Issue]: ...

    @abstractmethod
    def get_issue(self, org: str, repo: str, number: int) -> Issue: ...

    @abstractmethod
    def open_issue(self, org: str, repo: str, title: str, body: str = "") -> Issue: ...

    @abstractmethod
    def close_issue(self, org: str, repo: str, number: int) -> Issue: ...

    @abstractmethod
    def get_pull_requests(self, org: str, repo: str) -> list[PullRequest]: ...

    @abstractmethod
    def get_releases(self, org: str, repo: str) -> list[Release]: ...


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict):
        for key in ("message", "error_description", "error"):
            value = data.get(key)
            if isinstance(value, str):
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return response.text[:200]
