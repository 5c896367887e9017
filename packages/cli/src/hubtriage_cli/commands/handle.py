"""handle command — route a GitHub Actions event to the matching flow.

Intended as the single step of a workflow triggered on ``pull_request``
(or ``pull_request_target``) and ``pull_request_review``. GitHub Actions
exposes the event name and the path of the JSON payload through
GITHUB_EVENT_NAME and GITHUB_EVENT_PATH.
"""

from __future__ import annotations

import json

import click
from rich.console import Console

from hubtriage_cli.commands.consensus import run_consensus
from hubtriage_cli.commands.sync import run_sync
from hubtriage_core.triage import CONTENT_ACTIONS

console = Console()

PR_EVENTS = ("pull_request", "pull_request_target")
REVIEW_EVENTS = ("pull_request_review",)


def load_event(event_path: str) -> dict:
    try:
        with open(event_path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise click.UsageError(f"Could not read event payload {event_path}: {e}")


def route_event(event_name: str, payload: dict) -> str | None:
    """Return "sync", "consensus" or None for events the bot ignores."""
    action = payload.get("action")
    if event_name in PR_EVENTS and action in CONTENT_ACTIONS:
        return "sync"
    if event_name in REVIEW_EVENTS and action == "submitted":
        return "consensus"
    return None


@click.command("handle")
@click.option("--event-name", envvar="GITHUB_EVENT_NAME", required=True, help="Webhook event name.")
@click.option("--event-path", envvar="GITHUB_EVENT_PATH", required=True, help="Path to the event JSON payload.")
@click.option("--shadow", "-s", is_flag=True, help="Dry-run mode: compute everything but write nothing.")
@click.pass_context
def handle_cmd(ctx, event_name: str, event_path: str, shadow: bool):
    """Handle one pull request or review event."""
    payload = load_event(event_path)
    flow = route_event(event_name, payload)
    if flow is None:
        console.print(f"[dim]Ignoring {event_name}.{payload.get('action')}[/dim]")
        return

    try:
        repo_name = payload["repository"]["full_name"]
        pr_number = payload["pull_request"]["number"]
    except (KeyError, TypeError):
        raise click.UsageError(f"Event payload for {event_name} has no repository/pull_request")

    if flow == "sync":
        run_sync(ctx.obj, repo_name, pr_number, shadow=shadow)
    else:
        run_consensus(ctx.obj, repo_name, pr_number, shadow=shadow)
