"""Merge readiness from the approver team's reviews.

Only reviews by members of the approver team count. For each member the
last *decisive* review wins:

  - state APPROVED, or a body of exactly "lgtm"  -> approved
  - any other state except COMMENTED             -> not approved
  - COMMENTED with any other body                -> ignored

One member who is not approved blocks readiness no matter how many others
approved. Readiness also needs at least one decisive review; a PR with only
comments (or only non-member reviews) keeps whatever label it already has.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from hubtriage_core.gh.pull_request import get_reviews, get_team_members
from hubtriage_core.labels import PLUGIN_CHANGE, READY_TO_MERGE, LabelReconciler

logger = logging.getLogger(__name__)

LGTM = "lgtm"


def review_decision(review) -> bool | None:
    """Return True/False for a decisive review, None for a plain comment."""
    approved = review.state == "APPROVED" or review.body == LGTM
    if approved:
        return True
    if review.state != "COMMENTED":
        return False
    return None


def reduce_review_states(reviews, members: set[str]) -> dict[str, bool]:
    """Fold reviews, in the order given, into each team member's latest decision."""
    states: dict[str, bool] = {}
    for review in reviews:
        # Reviews by deleted accounts have no user.
        if review.user is None:
            continue
        login = review.user.login
        if login not in members:
            continue
        decision = review_decision(review)
        if decision is not None:
            states[login] = decision
    return states


def unapproved_logins(states: dict[str, bool]) -> list[str]:
    return [login for login, approved in states.items() if not approved]


@dataclass
class ConsensusSummary:
    # "skipped" | "no-reviews" | "blocked" | "ready" | "undecided"
    outcome: str
    review_states: dict[str, bool] = field(default_factory=dict)
    unapproved: list[str] = field(default_factory=list)


class ConsensusEngine:
    """Decides whether a PR carries the ready-to-merge label.

    ``team_client`` is the Github client used for the membership lookup. It
    may differ from the client that owns ``pr`` when the bot's own
    installation cannot see the organization's teams.
    """

    def __init__(self, team_client, org: str, team_slug: str):
        self.team_client = team_client
        self.org = org
        self.team_slug = team_slug

    def run(self, pr, reconciler: LabelReconciler) -> ConsensusSummary:
        if not reconciler.has(PLUGIN_CHANGE):
            return ConsensusSummary(outcome="skipped")

        reviews = get_reviews(pr)
        if len(reviews) == 0:
            return ConsensusSummary(outcome="no-reviews")

        members = get_team_members(self.team_client, self.org, self.team_slug)
        states = reduce_review_states(reviews, members)
        unapproved = unapproved_logins(states)

        if unapproved:
            logger.info("Unapproved for #%s: %s", pr.number, ", ".join(unapproved))
            reconciler.set_has_label(False, READY_TO_MERGE)
            return ConsensusSummary(outcome="blocked", review_states=states, unapproved=unapproved)
        if states:
            reconciler.set_has_label(True, READY_TO_MERGE)
            return ConsensusSummary(outcome="ready", review_states=states)
        return ConsensusSummary(outcome="undecided", review_states=states)
