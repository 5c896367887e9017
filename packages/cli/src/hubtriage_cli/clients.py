"""GitHub clients shared by every command of one invocation."""

from __future__ import annotations

import click

from hubtriage_core.gh.pull_request import get_client


def ensure_clients(obj: dict) -> tuple:
    """Return (client, team_client), building them on first use.

    The team client is only distinct from the primary one when a team token
    is configured. Both are created once and kept in the click context.
    """
    if "client" not in obj:
        config = obj["config"]
        if not config.get("github_token"):
            raise click.UsageError(
                "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
                "Create a token at https://github.com/settings/tokens"
            )
        primary = get_client(config["github_token"])
        obj["client"] = primary
        obj["team_client"] = get_client(config["team_token"]) if config.get("team_token") else primary
    return obj["client"], obj["team_client"]
