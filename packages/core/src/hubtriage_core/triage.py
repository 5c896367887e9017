"""Event flows: what the bot does when a PR's content changes and when it is reviewed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rich.console import Console

from hubtriage_core.classifier import classify_files
from hubtriage_core.comments import upsert_sticky_comment
from hubtriage_core.consensus import ConsensusEngine, ConsensusSummary
from hubtriage_core.gh.pull_request import ContentFetcher, get_changed_files
from hubtriage_core.labels import DEPENDENCY_CHANGE, PACKAGE_CHANGE, PLUGIN_CHANGE, READY_TO_MERGE, LabelReconciler
from hubtriage_core.narrative import BaseRepo, build_narrative

console = Console()
logger = logging.getLogger(__name__)

CONTENT_ACTIONS = ("opened", "synchronize", "reopened")


@dataclass
class TriageSummary:
    """What one content event changed on the PR, for the CLI to report."""

    repo: str
    pr_number: int
    labels_added: list[str] = field(default_factory=list)
    labels_removed: list[str] = field(default_factory=list)
    plugin_files: list[str] = field(default_factory=list)
    narrative: str = ""
    comment_action: str = "skipped"  # "created" | "updated" | "skipped"


def sync_pull_request(repo, pr, config: dict, fetch=None, shadow: bool = False) -> TriageSummary:
    """Reclassify a PR after its content changed.

    Order matters: ready-to-merge is dropped first, then the content labels
    are set, and the sticky comment is touched last, only once the whole
    narrative has been built. A malformed plugin file aborts after the label
    changes but before any comment is written.
    """
    if fetch is None:
        fetch = ContentFetcher(config.get("github_token")).fetch

    reconciler = LabelReconciler.for_issue(pr, shadow=shadow)

    # Any new content invalidates earlier approvals.
    reconciler.set_has_label(False, READY_TO_MERGE)

    classification = classify_files(
        get_changed_files(pr),
        dependency_files=config.get("dependency_files"),
        plugin_dir=config.get("plugin_dir", "plugins/"),
    )
    console.print(
        f"[cyan]#{pr.number}: {len(classification.plugin_files)} plugin, "
        f"{len(classification.dependency_files)} dependency, "
        f"{len(classification.other_files)} other file(s)[/cyan]"
    )

    reconciler.set_has_label(classification.has_plugin_change, PLUGIN_CHANGE)
    reconciler.set_has_label(classification.has_dependency_change, DEPENDENCY_CHANGE)
    reconciler.set_has_label(classification.has_other_change, PACKAGE_CHANGE)

    owner, _, name = repo.full_name.partition("/")
    base = BaseRepo(
        owner=owner,
        repo=name,
        branch=config.get("base_branch", "master"),
        plugin_dir=config.get("plugin_dir", "plugins/"),
    )
    narrative = build_narrative(classification, base, fetch, max_workers=config.get("max_workers", 8))

    comment_action = upsert_sticky_comment(pr, narrative, shadow=shadow)

    return TriageSummary(
        repo=repo.full_name,
        pr_number=pr.number,
        labels_added=list(reconciler.added),
        labels_removed=list(reconciler.removed),
        plugin_files=[f.filename for f in classification.plugin_files],
        narrative=narrative,
        comment_action=comment_action,
    )


def evaluate_reviews(pr, engine: ConsensusEngine, shadow: bool = False) -> tuple[ConsensusSummary, LabelReconciler]:
    """Re-derive ready-to-merge from the PR's current reviews."""
    reconciler = LabelReconciler.for_issue(pr, shadow=shadow)
    summary = engine.run(pr, reconciler)
    logger.debug("Consensus for #%s: %s %s", pr.number, summary.outcome, summary.review_states)
    return summary, reconciler
