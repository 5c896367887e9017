"""Fallback GitHub token from the GitHub CLI's stored session.

Only consulted when GITHUB_TOKEN is unset, which in practice means a local
run: in Actions the workflow always provides the token through the
environment, and load_config() has already picked it up.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)


def gh_cli_token(timeout: float = 5) -> str | None:
    """Return the token `gh auth login` stored, or None if gh is missing or logged out."""
    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("No token from gh CLI: %s", e)
        return None

    token = result.stdout.strip()
    if result.returncode != 0 or not token:
        logger.debug("`gh auth token` exited with %s and no token", result.returncode)
        return None
    return token
