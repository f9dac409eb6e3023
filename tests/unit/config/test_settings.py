from __future__ import annotations

from pathlib import Path

import pytest

from checklints.core.config import Settings, init_user_config, load_settings, write_default_config
from checklints.core.config.settings import coerce_env_value, env_layer, load_defaults
from checklints.core.exceptions import ConfigError
from helpers.checklists import write_text


def test_bundled_defaults(tmp_path: Path) -> None:
    settings = load_settings(config_file=tmp_path / "missing.yaml", environ={})

    assert settings == Settings()
    assert settings.read_cache and settings.write_cache
    assert settings.user_checklists is True
    assert settings.external_checklists == ()


def test_no_cache_implies_no_read_and_no_write() -> None:
    settings = Settings(no_cache=True)
    assert not settings.read_cache
    assert not settings.write_cache
    assert Settings(no_read_cache=True).write_cache
    assert Settings(no_write_cache=True).read_cache


def test_layers_apply_in_priority_order(tmp_path: Path) -> None:
    config_file = write_text(
        tmp_path / "config.yaml",
        """
        fail_fast: true
        user_checklists: false
        fetch_timeout: 5
        """,
    )
    environ = {"CHECKLINTS_FAIL_FAST": "false", "CHECKLINTS_NO_CACHE": "1"}

    settings = load_settings({"no_cache": None}, config_file=config_file, environ=environ)
    assert settings.fail_fast is False
    assert settings.user_checklists is False
    assert settings.no_cache is True
    assert settings.fetch_timeout == 5.0

    settings = load_settings({"fail_fast": True}, config_file=config_file, environ=environ)
    assert settings.fail_fast is True


def test_nested_env_keys_and_lists(tmp_path: Path) -> None:
    environ = {
        "CHECKLINTS_LOGGING__PATH": str(tmp_path / "run.log"),
        "CHECKLINTS_EXTERNAL_CHECKLISTS": "https://a.example/x.toml, https://b.example/y.toml",
        "CHECKLINTS_UNKNOWN_OPTION": "ignored",
        "CHECKLINTS_CONFIG_DIR": "/reserved",
    }
    settings = load_settings(config_file=tmp_path / "none.yaml", environ=environ)

    assert settings.log_path == tmp_path / "run.log"
    assert settings.external_checklists == ("https://a.example/x.toml", "https://b.example/y.toml")


def test_env_layer_only_knows_default_options() -> None:
    layer = env_layer(load_defaults(), {"CHECKLINTS_LOGGING": "x", "CHECKLINTS_CLEAR_CACHE": "yes"})
    assert layer == {"clear_cache": True}


@pytest.mark.parametrize(
    "raw,default,expected",
    [
        ("true", False, True),
        ("OFF", True, False),
        ('["a", "b"]', [], ["a", "b"]),
        ("a,b", [], ["a", "b"]),
        ("null", None, None),
        ("2.5", None, 2.5),
        ("7", None, 7),
        ("text", None, "text"),
    ],
)
def test_coerce_env_value(raw: str, default: object, expected: object) -> None:
    assert coerce_env_value(raw, default) == expected


def test_invalid_boolean_in_env_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="CHECKLINTS_FAIL_FAST"):
        load_settings(config_file=tmp_path / "none.yaml", environ={"CHECKLINTS_FAIL_FAST": "maybe"})


def test_invalid_config_values_fail_validation(tmp_path: Path) -> None:
    config_file = write_text(tmp_path / "config.yaml", "fail_fast: sometimes\n")
    with pytest.raises(ConfigError, match="Invalid settings"):
        load_settings(config_file=config_file, environ={})


def test_unknown_config_keys_fail_validation(tmp_path: Path) -> None:
    config_file = write_text(tmp_path / "config.yaml", "colour: blue\n")
    with pytest.raises(ConfigError):
        load_settings(config_file=config_file, environ={})


def test_non_mapping_config_file_is_rejected(tmp_path: Path) -> None:
    config_file = write_text(tmp_path / "config.yaml", "- a\n- b\n")
    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_settings(config_file=config_file, environ={})


def test_write_default_config_respects_force(tmp_path: Path) -> None:
    target = tmp_path / "config.yaml"
    assert write_default_config(target) is True
    target.write_text("fail_fast: true\n", encoding="utf-8")

    assert write_default_config(target) is False
    assert target.read_text(encoding="utf-8") == "fail_fast: true\n"

    assert write_default_config(target, force=True) is True
    assert "user_checklists: true" in target.read_text(encoding="utf-8")


def test_init_user_config_creates_layout(isolated_env) -> None:
    created = init_user_config()

    assert isolated_env.config_dir in created
    assert (isolated_env.config_dir / "config.yaml").is_file()
    assert isolated_env.user_checklists.is_dir()
    assert isolated_env.user_templates.is_dir()
    assert init_user_config() == []
