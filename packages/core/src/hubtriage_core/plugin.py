"""Plugin definition files and the source repositories they point at.

A plugin file is line-oriented ``key=value`` text. Only two keys matter here:
``repository`` (an https clone URL on GitHub) and ``commit`` (the revision to
build). Everything else is carried along untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_KV_RE = re.compile(r"([^=]+)=(.*)")
_CLONE_URL_RE = re.compile(r"https://github\.com/([^/]+)/([^.]+)\.git")


class InvalidPluginError(ValueError):
    """Raised when a plugin file is missing a required field or points at an unusable repository."""


@dataclass(frozen=True)
class RepoRef:
    user: str
    repo: str

    @property
    def url(self) -> str:
        return f"https://github.com/{self.user}/{self.repo}"


class PluginRecord(dict):
    """Parsed ``key=value`` properties of a single plugin file."""

    def require(self, key: str) -> str:
        value = self.get(key)
        if value is None:
            raise InvalidPluginError(f"Plugin file is missing required field `{key}`")
        return value

    @property
    def repository(self) -> str:
        return self.require("repository")

    @property
    def commit(self) -> str:
        return self.require("commit")

    def repo_ref(self) -> RepoRef:
        return extract_repo_ref(self.repository)


def parse_plugin(text: str) -> PluginRecord:
    """Parse plugin file text. Lines without a ``key=`` prefix are skipped; later keys win."""
    record = PluginRecord()
    for line in text.split("\n"):
        match = _KV_RE.search(line)
        if match:
            record[match.group(1)] = match.group(2)
    return record


def extract_repo_ref(clone_url: str) -> RepoRef:
    match = _CLONE_URL_RE.search(clone_url)
    if not match:
        raise InvalidPluginError(f"Plugin repository must be a github https clone url, not `{clone_url}`")
    return RepoRef(user=match.group(1), repo=match.group(2))
