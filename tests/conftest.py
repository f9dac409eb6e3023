import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'checklints' and tests/ importable for 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from checklints.core.utils.logging import reset_logging_for_tests
from helpers.env import IsolatedEnv


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by CLI tests so later tests start clean."""
    yield
    reset_logging_for_tests()


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> IsolatedEnv:
    """Point the user config and cache directories into ``tmp_path``.

    Every other ``CHECKLINTS_*`` variable is removed so settings come from
    the bundled defaults and whatever the test sets explicitly.
    """
    for key in list(os.environ):
        if key.startswith("CHECKLINTS_"):
            monkeypatch.delenv(key, raising=False)

    root = tmp_path.resolve()
    env = IsolatedEnv(
        config_dir=root / "config",
        cache_dir=root / "cache",
        project=root / "project",
    )
    env.project.mkdir()
    monkeypatch.setenv("CHECKLINTS_CONFIG_DIR", str(env.config_dir))
    monkeypatch.setenv("CHECKLINTS_CACHE_DIR", str(env.cache_dir))
    return env
