"""CLI entry point for hubtriage.

Commands:
  sync       — reclassify a PR's files, labels and sticky summary comment
  consensus  — recompute the ready-to-merge label from team reviews
  handle     — dispatch a GitHub Actions event payload to one of the above
"""

from __future__ import annotations

import importlib.metadata
import logging

import click

from hubtriage_cli.commands.consensus import consensus_cmd
from hubtriage_cli.commands.handle import handle_cmd
from hubtriage_cli.commands.sync import sync_cmd


@click.group()
@click.version_option(
    version=importlib.metadata.version("hubtriage"),
    prog_name="hubtriage",
)
@click.option(
    "--config",
    "config_path",
    default=".hubtriage.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="HUBTRIAGE_CONFIG",
)
@click.option("--base-branch", default=None, help="Branch holding the published plugin files. Overrides config file.")
@click.option("--team-org", default=None, help="Organization of the approver team. Overrides config file.")
@click.option("--team-slug", default=None, help="Slug of the approver team. Overrides config file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(
    ctx: click.Context,
    config_path: str,
    base_branch: str | None,
    team_org: str | None,
    team_slug: str | None,
    verbose: bool,
):
    """Pull request triage bot for plugin-hub repositories."""
    from hubtriage_core.config import load_config
    from hubtriage_cli.auth import gh_cli_token

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)

    try:
        config = load_config(
            config_path,
            overrides={"base_branch": base_branch, "team_org": team_org, "team_slug": team_slug},
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    # GITHUB_TOKEN wins; a local gh session is the fallback.
    if not config["github_token"]:
        config["github_token"] = gh_cli_token()

    ctx.obj["config"] = config


main.add_command(sync_cmd)
main.add_command(consensus_cmd)
main.add_command(handle_cmd)
