"""sync command — reclassify a PR after its content changed."""

from __future__ import annotations

import click
from rich.console import Console

from hubtriage_cli.clients import ensure_clients
from hubtriage_core.gh.pull_request import get_pull, get_repo
from hubtriage_core.plugin import InvalidPluginError
from hubtriage_core.triage import TriageSummary, sync_pull_request

console = Console()


def print_summary(summary: TriageSummary, shadow: bool) -> None:
    prefix = "Would add" if shadow else "Added"
    for label in summary.labels_added:
        console.print(f"  [green]{prefix} label:[/green] {label}")
    prefix = "Would remove" if shadow else "Removed"
    for label in summary.labels_removed:
        console.print(f"  [yellow]{prefix} label:[/yellow] {label}")
    if shadow and summary.narrative:
        console.print("\n[bold]Sticky comment (not posted)[/bold]\n")
        console.print(summary.narrative, markup=False)
    if summary.comment_action == "skipped":
        console.print(f"[dim]#{summary.pr_number}: no plugin changes to summarise.[/dim]")
    else:
        verb = "would be " if shadow else ""
        console.print(f"[green]#{summary.pr_number}: sticky comment {verb}{summary.comment_action}.[/green]")


def run_sync(obj: dict, repo_name: str, pr_number: int, shadow: bool = False) -> TriageSummary:
    config = obj["config"]
    client, _ = ensure_clients(obj)
    repo = get_repo(repo_name, client=client)
    pr = get_pull(repo, pr_number)
    try:
        summary = sync_pull_request(repo, pr, config, shadow=shadow)
    except InvalidPluginError as e:
        raise click.ClickException(str(e))
    print_summary(summary, shadow)
    return summary


@click.command("sync")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print label changes and the summary comment without writing to GitHub.",
)
@click.pass_context
def sync_cmd(ctx, repo: str, pr_number: int, shadow: bool):
    """Update plugin/package/dependency labels and the sticky summary comment.

    Also clears the ready-to-merge label: new content needs fresh approval.
    """
    run_sync(ctx.obj, repo, pr_number, shadow=shadow)
