"""Command pipelines without a shell.

A pipeline is a shell-pipe-style string such as ``"git log -1 | cut -c1-7"``.
It is split into stages on unquoted, unescaped ``|`` characters and each
stage is word-split with :mod:`shlex`. Stages run as real OS processes wired
together with pipes; ``shell=True`` is never used, so other shell
metacharacters (``;``, ``&&``, ``$VAR``) are passed through as arguments.
"""
from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, List, Mapping, Optional, Tuple

from checklints.core.exceptions import PipelineError

logger = logging.getLogger(__name__)


def split_pipeline(text: str) -> List[str]:
    """Split ``text`` on ``|`` characters outside quotes.

    A backslash-escaped ``\\|`` does not split; the escape is left in place
    for :func:`shlex.split` to resolve.
    """
    stages: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    escaped = False

    for ch in text:
        if escaped:
            current.append(ch)
            escaped = False
            continue
        if ch == "\\" and quote != "'":
            current.append(ch)
            escaped = True
            continue
        if quote is not None:
            if ch == quote:
                quote = None
            current.append(ch)
            continue
        if ch in ("'", '"'):
            quote = ch
            current.append(ch)
            continue
        if ch == "|":
            stages.append("".join(current))
            current = []
            continue
        current.append(ch)

    if quote is not None:
        raise PipelineError(f"Unterminated quote in pipeline: {text!r}", context={"pipeline": text})
    stages.append("".join(current))
    return stages


@dataclass(frozen=True, slots=True)
class PipelineOutput:
    """Captured result of the final pipeline stage.

    ``stdout``/``stderr`` are decoded lossily and trimmed; empty output is None.
    """

    code: int
    stdout: Optional[str] = None
    stderr: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code == 0


def _decode(data: Optional[bytes]) -> Optional[str]:
    if not data:
        return None
    text = data.decode("utf-8", errors="replace").strip()
    return text or None


def _kill_all(procs: List[subprocess.Popen[Any]]) -> None:
    for proc in procs:
        if proc.poll() is None:
            proc.kill()
        proc.wait()


@dataclass(frozen=True, slots=True)
class Pipeline:
    text: str
    stages: Tuple[Tuple[str, ...], ...]

    @classmethod
    def parse(cls, text: str) -> Pipeline:
        """Parse ``text`` into argv stages.

        Raises:
            PipelineError: If quoting is unbalanced or any stage is empty
        """
        stages: List[Tuple[str, ...]] = []
        for raw in split_pipeline(text):
            try:
                argv = shlex.split(raw)
            except ValueError as e:
                raise PipelineError(
                    f"Invalid pipeline stage {raw.strip()!r}: {e}", context={"pipeline": text}
                ) from e
            if not argv:
                raise PipelineError(f"Empty stage in pipeline: {text!r}", context={"pipeline": text})
            stages.append(tuple(argv))
        return cls(text=text, stages=tuple(stages))

    def resolve(self, env: Mapping[str, str]) -> List[List[str]]:
        """Resolve every stage's executable on the search path.

        Raises:
            PipelineError: If any executable cannot be found
        """
        resolved: List[List[str]] = []
        for argv in self.stages:
            exe = shutil.which(argv[0], path=env.get("PATH"))
            if exe is None:
                raise PipelineError(
                    f"Command not found: {argv[0]}",
                    context={"pipeline": self.text, "command": argv[0]},
                )
            resolved.append([exe, *argv[1:]])
        return resolved

    def run(
        self,
        extra_env: Optional[Mapping[str, str]] = None,
        *,
        cwd: Optional[Path | str] = None,
    ) -> PipelineOutput:
        """Run all stages and capture the final stage's output.

        Each stage's stdin is the previous stage's stdout. Intermediate
        stages write stderr to the inherited stream. Blocks until the final
        stage exits, then reaps the earlier stages.

        Args:
            extra_env: Variables layered over ``os.environ`` for every stage
            cwd: Working directory for every stage

        Raises:
            PipelineError: If an executable cannot be resolved or spawned
        """
        env = dict(os.environ)
        if extra_env:
            env.update({str(k): str(v) for k, v in extra_env.items()})

        resolved = self.resolve(env)
        procs: List[subprocess.Popen[bytes]] = []
        previous_stdout: Optional[IO[bytes]] = None

        try:
            for index, argv in enumerate(resolved):
                last = index == len(resolved) - 1
                logger.debug("Pipeline stage %d: %s", index, shlex.join(argv))
                proc = subprocess.Popen(
                    argv,
                    stdin=previous_stdout if previous_stdout is not None else subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE if last else None,
                    env=env,
                    cwd=str(cwd) if cwd is not None else None,
                )
                # The child owns the read end now.
                if previous_stdout is not None:
                    previous_stdout.close()
                previous_stdout = proc.stdout
                procs.append(proc)
        except OSError as e:
            if previous_stdout is not None:
                previous_stdout.close()
            _kill_all(procs)
            raise PipelineError(
                f"Failed to start pipeline {self.text!r}: {e}", context={"pipeline": self.text}
            ) from e

        stdout, stderr = procs[-1].communicate()
        for proc in procs[:-1]:
            proc.wait()

        output = PipelineOutput(
            code=procs[-1].returncode,
            stdout=_decode(stdout),
            stderr=_decode(stderr),
        )
        logger.debug("Pipeline %r exited with %d", self.text, output.code)
        return output


def run_pipeline(
    text: str,
    extra_env: Optional[Mapping[str, str]] = None,
    *,
    cwd: Optional[Path | str] = None,
) -> PipelineOutput:
    """Parse and run ``text`` in one step."""
    return Pipeline.parse(text).run(extra_env, cwd=cwd)


__all__ = [
    "split_pipeline",
    "Pipeline",
    "PipelineOutput",
    "run_pipeline",
]
