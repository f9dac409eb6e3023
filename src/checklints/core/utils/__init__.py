"""Utility helpers for checklints core.

- io/: File I/O operations (atomic writes, JSON, YAML)
- subprocess: Command pipelines without a shell
- paths: User config and cache directory resolution
- merge: Deep merge for layered settings
- logging: CLI logging setup
"""
from __future__ import annotations

from .io import (
    PathLike,
    atomic_write,
    ensure_directory,
    read_json,
    read_yaml,
    remove_tree,
    write_bytes,
    write_json_atomic,
    write_text,
)
from .merge import deep_merge
from .paths import (
    get_cache_dir,
    get_config_file,
    get_user_checklists_dir,
    get_user_config_dir,
    get_user_templates_dir,
)
from .subprocess import Pipeline, PipelineOutput, run_pipeline, split_pipeline

__all__ = [
    "PathLike",
    "atomic_write",
    "ensure_directory",
    "read_json",
    "read_yaml",
    "remove_tree",
    "write_bytes",
    "write_json_atomic",
    "write_text",
    "deep_merge",
    "get_cache_dir",
    "get_config_file",
    "get_user_checklists_dir",
    "get_user_config_dir",
    "get_user_templates_dir",
    "Pipeline",
    "PipelineOutput",
    "run_pipeline",
    "split_pipeline",
]
