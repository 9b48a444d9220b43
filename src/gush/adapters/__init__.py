"""Built-in provider adapters."""

from __future__ import annotations

from .bitbucket import BitbucketAdapter
from .github import GitHubAdapter
from .github_enterprise import GitHubEnterpriseAdapter
from .gitlab import GitLabAdapter

__all__ = [
    "BitbucketAdapter",
    "GitHubAdapter",
    "GitHubEnterpriseAdapter",
    "GitLabAdapter",
]
