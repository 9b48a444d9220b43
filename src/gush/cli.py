"""CLI entry point for gush.

Every command except ``core:configure`` runs against the adapter the
runtime resolved for the current working copy.
"""

from __future__ import annotations

from pathlib import Path

import click
from rich.panel import Panel

from . import __version__
from .config import CONFIG_FILENAME, default_home, deep_merge, read_config_file, save_config
from .errors import GushError
from .log import configure_logging
from .observers import RepositoryObserver, TableObserver, features
from .platform.runtime import CONFIGURE_COMMAND, GushGroup, Runtime, pass_runtime


@click.group(cls=GushGroup, observers=[TableObserver(), RepositoryObserver()])
@click.version_option(__version__, prog_name="gush")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """gush: pull request, issue and release workflows for your hosting provider."""
    configure_logging(verbose)
    runtime = ctx.ensure_object(Runtime)
    ctx.call_on_close(runtime.close)


def _require_repository(org: str | None, repo: str | None) -> tuple[str, str]:
    if not org or not repo:
        raise click.UsageError(
            "Could not determine the repository from the origin remote; "
            "pass --org and --repo"
        )
    return org, repo


# ---------------------------------------------------------------------------
# core
# ---------------------------------------------------------------------------


@cli.command(CONFIGURE_COMMAND)
@click.option("--adapter", "identifier", default="github", show_default=True, help="Provider to use.")
@click.option("--base-url", default=None, help="API base URL. Default: the provider's public API")
@click.option("--repo-domain-url", default=None, help="Web URL of the provider.")
@click.option("--username", prompt=True, help="Account name.")
@click.option("--token", prompt=True, hide_input=True, help="Password or API token.")
@click.option(
    "--auth-type",
    type=click.Choice(["http_password", "http_token"]),
    default="http_token",
    show_default=True,
)
@click.option(
    "--home",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for the configuration file. Default: $GUSH_HOME or ~/.gush",
)
@pass_runtime
def configure(
    runtime: Runtime,
    identifier: str,
    base_url: str | None,
    repo_domain_url: str | None,
    username: str,
    token: str,
    auth_type: str,
    home: Path | None,
) -> None:
    """Write the provider settings and credentials to the home configuration file."""
    adapter_class = runtime.registry.get(identifier)
    base_url = base_url or getattr(adapter_class, "default_base_url", "")
    if not base_url:
        raise GushError(f"--base-url is required for the '{identifier}' adapter")

    path = (home or default_home()) / CONFIG_FILENAME
    tree = deep_merge(
        read_config_file(path),
        {
            "adapter": identifier,
            "adapters": {
                identifier: {
                    "adapter_class": f"{adapter_class.__module__}:{adapter_class.__qualname__}",
                    "config": {
                        "base_url": base_url,
                        "repo_domain_url": repo_domain_url
                        or getattr(adapter_class, "default_repo_domain_url", ""),
                    },
                    "authentication": {
                        "username": username,
                        "password-or-token": token,
                        "http-auth-type": auth_type,
                    },
                }
            },
        },
    )
    save_config(path, tree)
    runtime.console.print(
        f"[green]✓ Configuration file saved successfully.[/green] ({path})", soft_wrap=True
    )


# ---------------------------------------------------------------------------
# issues
# ---------------------------------------------------------------------------


@cli.command("issue:list")
@features("repository", "table")
@pass_runtime
def issue_list(runtime: Runtime, org: str | None, repo: str | None, table_layout: str) -> None:
    """List open issues."""
    org, repo = _require_repository(org, repo)
    issues = runtime.adapter.get_issues(org, repo)
    if not issues:
        runtime.console.print("[yellow]No open issues.")
        return
    runtime.helper("table").render(
        ["#", "Title", "State", "Author", "Assignee", "Labels"],
        [
            (i.number, i.title, i.state, i.author, i.assignee or "", ", ".join(i.labels))
            for i in issues
        ],
        title=f"Issues: {org}/{repo}",
        layout=table_layout,
    )


@cli.command("issue:show")
@click.argument("number", type=int)
@features("repository")
@pass_runtime
def issue_show(runtime: Runtime, number: int, org: str | None, repo: str | None) -> None:
    """Show a single issue."""
    org, repo = _require_repository(org, repo)
    issue = runtime.adapter.get_issue(org, repo, number)
    runtime.console.print(
        Panel(
            issue.body or "[dim]No description provided.",
            title=f"#{issue.number}: {issue.title}",
            subtitle=f"{issue.state} · {issue.author}",
            border_style="cyan",
        )
    )
    if issue.url:
        runtime.console.print(issue.url, soft_wrap=True)


@cli.command("issue:create")
@click.option("--title", required=True, help="Issue title.")
@click.option("--body", default="", help="Issue description.")
@features("repository")
@pass_runtime
def issue_create(runtime: Runtime, title: str, body: str, org: str | None, repo: str | None) -> None:
    """Open a new issue."""
    org, repo = _require_repository(org, repo)
    issue = runtime.adapter.open_issue(org, repo, title, body)
    runtime.console.print(f"[green]✓ Created issue #{issue.number}", soft_wrap=True)
    if issue.url:
        runtime.console.print(issue.url, soft_wrap=True)


@cli.command("issue:close")
@click.argument("number", type=int)
@features("repository")
@pass_runtime
def issue_close(runtime: Runtime, number: int, org: str | None, repo: str | None) -> None:
    """Close an issue."""
    org, repo = _require_repository(org, repo)
    issue = runtime.adapter.close_issue(org, repo, number)
    runtime.console.print(f"[green]✓ Closed issue #{issue.number} ({issue.state})", soft_wrap=True)


# ---------------------------------------------------------------------------
# pull requests and releases
# ---------------------------------------------------------------------------


@cli.command("pull-request:list")
@features("repository", "table")
@pass_runtime
def pull_request_list(runtime: Runtime, org: str | None, repo: str | None, table_layout: str) -> None:
    """List open pull requests."""
    org, repo = _require_repository(org, repo)
    pull_requests = runtime.adapter.get_pull_requests(org, repo)
    if not pull_requests:
        runtime.console.print("[yellow]No open pull requests.")
        return
    runtime.helper("table").render(
        ["#", "Title", "Author", "Head", "Base"],
        [(pr.number, pr.title, pr.author, pr.head, pr.base) for pr in pull_requests],
        title=f"Pull requests: {org}/{repo}",
        layout=table_layout,
    )


@cli.command("release:list")
@features("repository", "table")
@pass_runtime
def release_list(runtime: Runtime, org: str | None, repo: str | None, table_layout: str) -> None:
    """List releases."""
    org, repo = _require_repository(org, repo)
    releases = runtime.adapter.get_releases(org, repo)
    if not releases:
        runtime.console.print("[yellow]No releases.")
        return
    runtime.helper("table").render(
        ["Tag", "Name", "Draft", "Prerelease", "Created"],
        [
            (r.tag_name, r.name, "yes" if r.draft else "no", "yes" if r.prerelease else "no", r.created_at)
            for r in releases
        ],
        title=f"Releases: {org}/{repo}",
        layout=table_layout,
    )


if __name__ == "__main__":
    cli()
