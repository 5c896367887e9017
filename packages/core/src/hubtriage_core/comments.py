from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

STICKY_MARKER = "<!-- rlphc -->"


def sticky_body(narrative: str, marker: str = STICKY_MARKER) -> str:
    return f"{marker}\n{narrative}"


def find_sticky_comment(issue, marker: str = STICKY_MARKER):
    """Return the first comment whose body starts with ``marker``, or None."""
    for comment in issue.get_issue_comments():
        if (comment.body or "").startswith(marker):
            return comment
    return None


def upsert_sticky_comment(issue, narrative: str, marker: str = STICKY_MARKER, shadow: bool = False) -> str:
    """Keep a single marker comment on the issue in step with ``narrative``.

    An existing sticky comment is always overwritten, even with an empty
    narrative, so it never shows a stale summary. A new one is only created
    when there is something to say.

    Returns "updated", "created" or "skipped".
    """
    body = sticky_body(narrative, marker)
    sticky = find_sticky_comment(issue, marker)
    if sticky is not None:
        if not shadow:
            sticky.edit(body)
        logger.info("Updated sticky comment %s", sticky.id)
        return "updated"
    if narrative:
        if not shadow:
            issue.create_issue_comment(body)
        logger.info("Created sticky comment")
        return "created"
    return "skipped"
