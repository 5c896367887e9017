"""Human-readable summary of the plugin files changed by a pull request.

Each plugin file becomes one paragraph describing what happened to it:
a new plugin links to its source tree, an update links to a compare view
between the old and new commits, a rename warns that installs will break.
The old side of an update is always read from the base repository's branch,
not from the pull request's merge base.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable

from hubtriage_core.classifier import FileClassification
from hubtriage_core.gh.pull_request import base_raw_url
from hubtriage_core.plugin import PluginRecord, parse_plugin

logger = logging.getLogger(__name__)

NON_PLUGIN_WARNING = "**Includes non-plugin changes**"


@dataclass
class BaseRepo:
    """Where the currently published plugin files live."""

    owner: str
    repo: str
    branch: str = "master"
    plugin_dir: str = "plugins/"

    def plugin_url(self, plugin_name: str) -> str:
        return base_raw_url(self.owner, self.repo, self.branch, self.plugin_dir + plugin_name)


def _plugin_name(path: str, plugin_dir: str) -> str:
    return path.replace(plugin_dir, "", 1)


def _compare_link(old: PluginRecord, new: PluginRecord) -> str:
    old_ref = old.repo_ref()
    new_ref = new.repo_ref()
    return f"[{old.commit}...{new.commit}]({old_ref.url}/compare/{old.commit}...{new_ref.user}:{new.commit})"


def _describe_added(file, name: str, new: PluginRecord, base: BaseRepo, fetch) -> str:
    return f"New plugin `{name}`: {new.repo_ref().url}/tree/{new.commit}"


def _describe_modified(file, name: str, new: PluginRecord, base: BaseRepo, fetch) -> str:
    old = parse_plugin(fetch(base.plugin_url(name)))
    return f"`{name}`: {_compare_link(old, new)}"


def _describe_renamed(file, name: str, new: PluginRecord, base: BaseRepo, fetch) -> str:
    old_name = _plugin_name(file.previous_filename, base.plugin_dir)
    old = parse_plugin(fetch(base.plugin_url(old_name)))
    return (
        f"`{old_name}` renamed to `{name}`; this will cause all current installs to become uninstalled.\n"
        f"{_compare_link(old, new)}"
    )


def _describe_unknown(file, name: str, new: PluginRecord, base: BaseRepo, fetch) -> str:
    logger.warning("Unrecognised file status %r for %s", file.status, file.filename)
    return f"What is a `{file.status}`?"


# "removed" never reaches this table: it needs no fetch and is handled first.
_DESCRIBERS: dict[str, Callable[..., str]] = {
    "added": _describe_added,
    "modified": _describe_modified,
    "renamed": _describe_renamed,
}


def describe_plugin_change(file, base: BaseRepo, fetch: Callable[[str], str]) -> str:
    """Return the summary paragraph for one plugin file.

    Raises InvalidPluginError if the new plugin file (or, for updates, the old
    one) lacks a GitHub https clone URL or a required field.
    """
    name = _plugin_name(file.filename, base.plugin_dir)
    if file.status == "removed":
        return f"Removed `{name}` plugin"

    new = parse_plugin(fetch(file.raw_url))
    # Validate the new clone URL up front, whatever the status.
    new.repo_ref()

    describer = _DESCRIBERS.get(file.status, _describe_unknown)
    return describer(file, name, new, base, fetch)


def build_narrative(
    classification: FileClassification,
    base: BaseRepo,
    fetch: Callable[[str], str],
    max_workers: int = 8,
) -> str:
    """Describe every plugin file, concurrently, joined in file-list order.

    The first failure (malformed plugin, failed fetch) is re-raised here and
    no partial narrative is returned.
    """
    plugin_files = classification.plugin_files
    if not plugin_files:
        return ""

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(plugin_files)))) as pool:
        # map() yields in submission order regardless of completion order.
        paragraphs = list(pool.map(lambda f: describe_plugin_change(f, base, fetch), plugin_files))

    text = "\n\n".join(paragraphs)
    if classification.has_non_plugin_change:
        text = f"{NON_PLUGIN_WARNING}\n\n{text}"
    return text
