"""Status labels the bot owns, and the primitive that keeps them in sync."""

from __future__ import annotations

import logging

from github import GithubException

from hubtriage_core.gh.pull_request import get_label_names

logger = logging.getLogger(__name__)

PLUGIN_CHANGE = "plugin change"
PACKAGE_CHANGE = "package change"
DEPENDENCY_CHANGE = "dependency change"
READY_TO_MERGE = "ready to merge"


class LabelReconciler:
    """Adds or removes one label at a time against a snapshot of the issue's labels.

    The snapshot is taken once, when the reconciler is built, and kept up to
    date with every change it makes, so calling set_has_label() again with the
    same arguments never issues a second API call. In shadow mode the
    changes are recorded but not sent.
    """

    def __init__(self, issue, labels: set[str], shadow: bool = False):
        self._issue = issue
        self.labels = set(labels)
        self.shadow = shadow
        self.added: list[str] = []
        self.removed: list[str] = []

    @classmethod
    def for_issue(cls, issue, shadow: bool = False) -> "LabelReconciler":
        return cls(issue, get_label_names(issue), shadow=shadow)

    def has(self, label: str) -> bool:
        return label in self.labels

    def set_has_label(self, condition: bool, label: str) -> None:
        if condition and label not in self.labels:
            if not self.shadow:
                self._issue.add_to_labels(label)
            self.labels.add(label)
            self.added.append(label)
            logger.info("Added label %r", label)
        elif not condition and label in self.labels:
            if not self.shadow:
                self._remove(label)
            self.labels.discard(label)
            self.removed.append(label)
            logger.info("Removed label %r", label)

    def _remove(self, label: str) -> None:
        try:
            self._issue.remove_from_labels(label)
        except GithubException as e:
            # Someone else removed it between our snapshot and now.
            if e.status != 404:
                raise
            logger.debug("Label %r was already gone", label)
