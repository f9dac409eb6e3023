"""
Content hash command.

SUMMARY: Print the content hash of a local file or a remote reference, for
pinning external checklists and templates with ``::hash``.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from checklints.cli import OutputFormatter, add_json_flag
from checklints.core.cache.remote import fetch_bytes
from checklints.core.hashing import hash_bytes, hash_file
from checklints.core.models.remote import RemoteFile

SUMMARY = "Print the content hash of a file or remote reference"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register CLI arguments for ``checklints hash``."""
    parser.add_argument("target", metavar="PATH_OR_REF", help="Local file or remote reference")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for a remote fetch",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    target = str(args.target)

    if "://" in target:
        remote = RemoteFile.parse(target)
        digest = hash_bytes(fetch_bytes(remote.url, timeout=args.timeout))
        pinned = f"{remote.url}::{digest}"
        formatter.success({"target": str(remote.url), "hash": digest, "pinned": pinned}, pinned)
        return 0

    path = Path(target)
    if not path.is_file():
        formatter.error(f"File not found: {path}", error_code="not_found")
        return 1
    digest = hash_file(path)
    formatter.success({"target": str(path), "hash": digest}, digest)
    return 0
