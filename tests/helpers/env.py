"""Isolated user/cache/project directories for tests."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from checklints.core.config import Settings, load_settings


@dataclass
class IsolatedEnv:
    config_dir: Path
    cache_dir: Path
    project: Path

    @property
    def user_checklists(self) -> Path:
        return self.config_dir / "checklists"

    @property
    def user_templates(self) -> Path:
        return self.config_dir / "templates"

    def settings(self, **overrides) -> Settings:
        """Settings from bundled defaults plus ``overrides``.

        User checklists are off unless asked for, since most tests never
        create the user directories.
        """
        overrides.setdefault("user_checklists", False)
        return load_settings(overrides, config_file=self.config_dir / "config.yaml", environ={})
