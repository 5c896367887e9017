"""Tests for the review consensus engine."""

import types
from unittest.mock import MagicMock

import pytest

from hubtriage_core.consensus import ConsensusEngine, reduce_review_states, review_decision, unapproved_logins
from hubtriage_core.labels import PLUGIN_CHANGE, READY_TO_MERGE, LabelReconciler

TEAM = {"alice", "bob"}


def review(login, state, body=""):
    return types.SimpleNamespace(user=types.SimpleNamespace(login=login), state=state, body=body)


def make_pr(reviews, number=7):
    pr = MagicMock()
    pr.number = number
    pr.get_reviews.return_value = reviews
    return pr


def make_engine(members=TEAM):
    client = MagicMock()
    team = client.get_organization.return_value.get_team_by_slug.return_value
    team.get_members.return_value = [types.SimpleNamespace(login=m) for m in members]
    return ConsensusEngine(client, org="runelite", team_slug="plugin-approvers"), client


def run(reviews, labels=(PLUGIN_CHANGE,), members=TEAM):
    engine, client = make_engine(members)
    pr = make_pr(reviews)
    reconciler = LabelReconciler(pr, set(labels))
    summary = engine.run(pr, reconciler)
    return summary, reconciler, pr, client


class TestReviewDecision:
    def test_approved(self):
        assert review_decision(review("a", "APPROVED")) is True

    def test_lgtm_comment_is_approval(self):
        assert review_decision(review("a", "COMMENTED", "lgtm")) is True

    def test_lgtm_overrides_changes_requested(self):
        assert review_decision(review("a", "CHANGES_REQUESTED", "lgtm")) is True

    def test_lgtm_must_be_exact(self):
        assert review_decision(review("a", "COMMENTED", "LGTM!")) is None

    def test_changes_requested(self):
        assert review_decision(review("a", "CHANGES_REQUESTED", "please fix")) is False

    def test_plain_comment_not_decisive(self):
        assert review_decision(review("a", "COMMENTED", "needs work")) is None

    def test_none_body_comment(self):
        assert review_decision(review("a", "COMMENTED", None)) is None


class TestReduceReviewStates:
    def test_last_decisive_review_wins(self):
        states = reduce_review_states(
            [review("alice", "CHANGES_REQUESTED"), review("alice", "APPROVED")], TEAM
        )
        assert states == {"alice": True}

    def test_later_rejection_overrides_approval(self):
        states = reduce_review_states([review("alice", "APPROVED"), review("alice", "CHANGES_REQUESTED")], TEAM)
        assert states == {"alice": False}

    def test_comment_does_not_reset(self):
        states = reduce_review_states([review("alice", "APPROVED"), review("alice", "COMMENTED", "nit")], TEAM)
        assert states == {"alice": True}

    def test_comment_does_not_create_entry(self):
        assert reduce_review_states([review("bob", "COMMENTED", "needs work")], TEAM) == {}

    def test_non_members_ignored(self):
        states = reduce_review_states([review("mallory", "CHANGES_REQUESTED"), review("alice", "APPROVED")], TEAM)
        assert states == {"alice": True}

    def test_deleted_account_reviews_skipped(self):
        ghost = types.SimpleNamespace(user=None, state="CHANGES_REQUESTED", body="")
        states = reduce_review_states([ghost, review("alice", "APPROVED")], TEAM)
        assert states == {"alice": True}

    def test_unapproved_logins(self):
        assert unapproved_logins({"alice": True, "bob": False}) == ["bob"]


class TestConsensusEngine:
    def test_skips_without_plugin_change_label(self):
        summary, reconciler, pr, client = run([review("alice", "APPROVED")], labels=())
        assert summary.outcome == "skipped"
        pr.get_reviews.assert_not_called()
        assert READY_TO_MERGE not in reconciler.labels

    def test_no_reviews_is_noop(self):
        summary, reconciler, pr, client = run([], labels=(PLUGIN_CHANGE, READY_TO_MERGE))
        assert summary.outcome == "no-reviews"
        client.get_organization.assert_not_called()
        assert READY_TO_MERGE in reconciler.labels
        pr.remove_from_labels.assert_not_called()

    def test_approval_with_non_decisive_comment_adds_label(self):
        summary, reconciler, pr, _ = run([review("alice", "APPROVED"), review("bob", "COMMENTED", "needs work")])
        assert summary.outcome == "ready"
        assert summary.review_states == {"alice": True}
        pr.add_to_labels.assert_called_once_with(READY_TO_MERGE)

    def test_single_rejection_blocks(self):
        summary, reconciler, pr, _ = run(
            [review("alice", "APPROVED"), review("bob", "CHANGES_REQUESTED")],
            labels=(PLUGIN_CHANGE, READY_TO_MERGE),
        )
        assert summary.outcome == "blocked"
        assert summary.unapproved == ["bob"]
        pr.remove_from_labels.assert_called_once_with(READY_TO_MERGE)
        pr.add_to_labels.assert_not_called()

    def test_rejection_without_label_present_does_nothing(self):
        summary, reconciler, pr, _ = run([review("bob", "CHANGES_REQUESTED")])
        assert summary.outcome == "blocked"
        pr.remove_from_labels.assert_not_called()
        pr.add_to_labels.assert_not_called()

    @pytest.mark.parametrize("approvals", [1, 5, 20])
    def test_rejection_blocks_regardless_of_approval_count(self, approvals):
        members = {f"m{i}" for i in range(approvals)} | {"bob"}
        reviews = [review(f"m{i}", "APPROVED") for i in range(approvals)] + [review("bob", "DISMISSED")]
        summary, reconciler, _, _ = run(reviews, members=members)
        assert READY_TO_MERGE not in reconciler.labels

    def test_changes_requested_then_approved_is_ready(self):
        summary, reconciler, pr, _ = run([review("alice", "CHANGES_REQUESTED"), review("alice", "APPROVED")])
        assert summary.outcome == "ready"
        assert READY_TO_MERGE in reconciler.labels

    def test_only_non_member_reviews_is_noop(self):
        # Reviews exist, so the empty-review guard passes, but none count.
        summary, reconciler, pr, _ = run(
            [review("mallory", "APPROVED")], labels=(PLUGIN_CHANGE, READY_TO_MERGE)
        )
        assert summary.outcome == "undecided"
        assert summary.review_states == {}
        pr.add_to_labels.assert_not_called()
        pr.remove_from_labels.assert_not_called()
        assert READY_TO_MERGE in reconciler.labels

    def test_only_non_member_reviews_never_adds(self):
        summary, reconciler, pr, _ = run([review("mallory", "APPROVED")])
        assert READY_TO_MERGE not in reconciler.labels
        pr.add_to_labels.assert_not_called()

    def test_only_comments_leaves_label_alone(self):
        summary, reconciler, pr, _ = run(
            [review("alice", "COMMENTED", "hmm")], labels=(PLUGIN_CHANGE, READY_TO_MERGE)
        )
        assert summary.outcome == "undecided"
        assert READY_TO_MERGE in reconciler.labels

    def test_membership_looked_up_with_team_client(self):
        _, _, _, client = run([review("alice", "APPROVED")])
        client.get_organization.assert_called_once_with("runelite")
        client.get_organization.return_value.get_team_by_slug.assert_called_once_with("plugin-approvers")
