"""Partition a pull request's changed files into plugin, dependency and other changes."""

from __future__ import annotations

from dataclasses import dataclass, field

from hubtriage_core.config import DEFAULT_DEPENDENCY_FILES


@dataclass
class FileClassification:
    plugin_files: list = field(default_factory=list)
    dependency_files: list = field(default_factory=list)
    other_files: list = field(default_factory=list)

    @property
    def has_plugin_change(self) -> bool:
        return len(self.plugin_files) > 0

    @property
    def has_dependency_change(self) -> bool:
        return len(self.dependency_files) > 0

    @property
    def has_other_change(self) -> bool:
        return len(self.other_files) > 0

    @property
    def has_non_plugin_change(self) -> bool:
        return self.has_dependency_change or self.has_other_change


def classify_files(
    files,
    dependency_files: list[str] | None = None,
    plugin_dir: str = "plugins/",
) -> FileClassification:
    """Sort files into exactly one bucket each, preserving input order.

    A path under ``plugin_dir`` is a plugin change even if it also happens to
    match a dependency manifest path.
    """
    manifests = set(DEFAULT_DEPENDENCY_FILES if dependency_files is None else dependency_files)
    result = FileClassification()
    for f in files:
        if f.filename.startswith(plugin_dir):
            result.plugin_files.append(f)
        elif f.filename in manifests:
            result.dependency_files.append(f)
        else:
            result.other_files.append(f)
    return result
