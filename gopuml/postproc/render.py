"""Invocation of an external diagram renderer such as plantuml."""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ..logging import get_logger

Runner = Callable[[List[str]], "subprocess.CompletedProcess[str]"]

logger = get_logger("render")


@dataclass
class RenderResult:
    """Exit status and captured streams of one renderer invocation."""

    command: List[str]
    returncode: Optional[int]
    output: str
    error: str
    started_at: datetime
    finished_at: datetime

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def parse_command(command: str | Sequence[str] | None) -> List[str]:
    if command is None:
        return []
    if isinstance(command, str):
        return shlex.split(command)
    return [str(part) for part in command]


class RenderCommand:
    """Runs the configured command with the document path appended. No retries."""

    def __init__(self, command: str | Sequence[str], runner: Runner | None = None) -> None:
        self.command = parse_command(command)
        if not self.command:
            raise ValueError("Render command must not be empty")
        self._runner = runner or self._default_runner

    def run(self, document: Path) -> RenderResult:
        args = [*self.command, str(document)]
        started = datetime.now(UTC)
        logger.info("Running renderer: %s", shlex.join(args))
        try:
            completed = self._runner(args)
        except OSError as exc:
            logger.warning("Renderer could not be started: %s", exc)
            return RenderResult(
                command=args,
                returncode=None,
                output="",
                error=str(exc),
                started_at=started,
                finished_at=datetime.now(UTC),
            )
        return RenderResult(
            command=args,
            returncode=completed.returncode,
            output=completed.stdout or "",
            error=completed.stderr or "",
            started_at=started,
            finished_at=datetime.now(UTC),
        )

    @staticmethod
    def _default_runner(args: List[str]) -> "subprocess.CompletedProcess[str]":
        return subprocess.run(args, capture_output=True, text=True, check=False)


__all__ = ["RenderCommand", "RenderResult", "Runner", "parse_command"]
