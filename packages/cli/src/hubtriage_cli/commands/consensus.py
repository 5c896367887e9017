"""consensus command — recompute ready-to-merge from the approver team's reviews."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from hubtriage_cli.clients import ensure_clients
from hubtriage_core.consensus import ConsensusEngine, ConsensusSummary
from hubtriage_core.gh.pull_request import get_pull, get_repo
from hubtriage_core.triage import evaluate_reviews

console = Console()

_OUTCOME_MESSAGES = {
    "skipped": "[dim]Not a plugin change; review consensus does not apply.[/dim]",
    "no-reviews": "[dim]No reviews yet.[/dim]",
    "blocked": "[red]Blocked by unapproved team reviews.[/red]",
    "ready": "[green]Approved by the team.[/green]",
    "undecided": "[yellow]No decisive team reviews; labels left unchanged.[/yellow]",
}


def build_engine(obj: dict) -> ConsensusEngine:
    config = obj["config"]
    _, team_client = ensure_clients(obj)
    return ConsensusEngine(team_client, org=config["team_org"], team_slug=config["team_slug"])


def print_summary(pr_number: int, summary: ConsensusSummary) -> None:
    if summary.review_states:
        table = Table(title=f"Team reviews — #{pr_number}", show_header=True, header_style="bold cyan")
        table.add_column("Reviewer")
        table.add_column("Decision")
        for login, approved in summary.review_states.items():
            table.add_row(login, "[green]approved[/green]" if approved else "[red]not approved[/red]")
        console.print(table)
    console.print(_OUTCOME_MESSAGES.get(summary.outcome, summary.outcome))


def run_consensus(obj: dict, repo_name: str, pr_number: int, shadow: bool = False) -> ConsensusSummary:
    client, _ = ensure_clients(obj)
    repo = get_repo(repo_name, client=client)
    pr = get_pull(repo, pr_number)
    summary, reconciler = evaluate_reviews(pr, build_engine(obj), shadow=shadow)
    print_summary(pr_number, summary)
    verb = "would be " if shadow else ""
    for label in reconciler.added:
        console.print(f"  [green]Label {verb}added:[/green] {label}")
    for label in reconciler.removed:
        console.print(f"  [yellow]Label {verb}removed:[/yellow] {label}")
    return summary


@click.command("consensus")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option("--shadow", "-s", is_flag=True, help="Dry-run mode: compute the decision without changing labels.")
@click.pass_context
def consensus_cmd(ctx, repo: str, pr_number: int, shadow: bool):
    """Add or remove the ready-to-merge label based on approver team reviews."""
    run_consensus(ctx.obj, repo, pr_number, shadow=shadow)
