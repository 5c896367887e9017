"""Bot settings: built-in defaults, then .hubtriage.yml, then command-line flags.

Credentials never come from the settings file. GITHUB_TOKEN and TEAM_TOKEN
are read from the environment here and nowhere else.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_DEPENDENCY_FILES = [
    "package/verification-template/build.gradle",
    "package/verification-template/gradle/verification-metadata.xml",
]

DEFAULT_CONFIG: dict = {
    "plugin_dir": "plugins/",
    "dependency_files": DEFAULT_DEPENDENCY_FILES,
    "team_org": "runelite",
    "team_slug": "plugin-approvers",
    "base_branch": "master",  # branch the "old" plugin file is read from on modify/rename
    "max_workers": 8,
}


def _read_settings_file(path: Path) -> dict:
    """Return the known settings from a YAML file; unknown keys are dropped with a warning."""
    if not path.exists():
        logger.debug("No settings file at %s, using defaults", path)
        return {}

    settings = yaml.safe_load(path.read_text()) or {}
    if not isinstance(settings, dict):
        raise ValueError(f"{path} must contain a mapping of settings, not {type(settings).__name__}")

    unknown = sorted(set(settings) - set(DEFAULT_CONFIG))
    if unknown:
        logger.warning("Ignoring unknown settings in %s: %s", path, ", ".join(unknown))
    return {key: value for key, value in settings.items() if key in DEFAULT_CONFIG}


def load_config(config_path: str = ".hubtriage.yml", overrides: Optional[dict] = None) -> dict:
    """Build the settings dict for one invocation.

    ``overrides`` holds command-line values; ``None`` means the flag was not
    given and the file or default value stands. Raises ValueError when the
    settings file is not a YAML mapping.
    """
    config = {**DEFAULT_CONFIG, "dependency_files": list(DEFAULT_DEPENDENCY_FILES)}
    config.update(_read_settings_file(Path(config_path)))
    config.update({key: value for key, value in (overrides or {}).items() if value is not None})

    config["github_token"] = os.environ.get("GITHUB_TOKEN") or None
    config["team_token"] = os.environ.get("TEAM_TOKEN") or None
    return config
