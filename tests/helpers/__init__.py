"""Test helper modules for the checklints test suite.

- env: IsolatedEnv, the directories used by the ``isolated_env`` fixture
- checklists: writers for checklist TOML files and project files
- remote: fake ``urlopen`` for remote checklist/template fetches
"""
from __future__ import annotations
