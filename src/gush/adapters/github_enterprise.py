"""GitHub Enterprise adapter.

Same API as github.com, served from the installation's own host, so
``adapters.github_enterprise.config.base_url`` is required
(e.g. ``https://github.example.com/api/v3``).
"""

from __future__ import annotations

from .github import GitHubAdapter


class GitHubEnterpriseAdapter(GitHubAdapter):
    name = "github_enterprise"
    default_base_url = ""
    default_repo_domain_url = ""
