"""Infer the hosting provider from the ``origin`` remote of a working copy."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ..errors import DetectionFailed

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "github"
DETECTION_TIMEOUT = 3600

# Checked in order; the first hostname found in the URL wins.
PROVIDER_HOSTS: tuple[tuple[str, str], ...] = (
    ("github.com", "github"),
    ("bitbucket.org", "bitbucket"),
    ("gitlab.com", "gitlab"),
)

_SETUP_HINT = (
    "The adapter type could not be determined. "
    "Please run the core:configure command"
)


def provider_from_url(url: str) -> str:
    """Map a remote URL to a provider identifier.

    Unknown hosts, and an empty URL, map to ``github``.
    """
    remote = url.lower()
    for host, provider in PROVIDER_HOSTS:
        if host in remote:
            return provider
    return DEFAULT_PROVIDER


def detect_provider(
    cwd: str | Path | None = None, timeout: float = DETECTION_TIMEOUT
) -> str:
    """Run ``git config --get remote.origin.url`` and map the result.

    Args:
        cwd: Working copy to inspect. Defaults to the current directory.
        timeout: Seconds to wait for git before giving up.

    Returns:
        The provider identifier.

    Raises:
        DetectionFailed: If git is missing, times out or exits non-zero.
    """
    cmd = ["git", "config", "--get", "remote.origin.url"]
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise DetectionFailed(f"{_SETUP_HINT} (git timed out after {timeout}s)") from exc
    except OSError as exc:
        raise DetectionFailed(f"{_SETUP_HINT} ({exc})") from exc

    if result.returncode != 0:
        raise DetectionFailed(_SETUP_HINT)

    provider = provider_from_url(result.stdout.strip())
    logger.debug("Detected provider %r from remote %r", provider, result.stdout.strip())
    return provider
