from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from .config import config
from .errors import ProcessExitFailure, ProcessLaunchFailure
from .output import extract_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


def strip_path_entries(path_value: str, patterns: Iterable[str]) -> str:
    fragments = [item for item in patterns if item]
    kept = [
        entry
        for entry in path_value.split(os.pathsep)
        if entry and not any(fragment in entry for fragment in fragments)
    ]
    return os.pathsep.join(kept)


def build_engine_env(base_env: Mapping[str, str] | None = None) -> dict[str, str]:
    """Environment handed to every engine process.

    Built from a copy of the host environment; only PATH (filtered) and the
    configured passthrough variables are forwarded.
    """
    source = dict(os.environ if base_env is None else base_env)
    env = {"PATH": strip_path_entries(source.get("PATH", ""), config.ENGINE.PATH_EXCLUDE_PATTERNS)}
    for key in config.ENGINE.ENV_PASSTHROUGH:
        value = source.get(key)
        if value:
            env[key] = value
    return env


class ProcessInvoker:
    """Runs the Aptos CLI synchronously and returns its parsed JSON answer."""

    def __init__(self, command: Sequence[str] | str | None = None) -> None:
        if command is None:
            command = config.ENGINE.BINARY
        if isinstance(command, str):
            command = [command]
        if not command:
            raise ValueError("engine command cannot be empty")
        self.command = [str(item) for item in command]

    def execute(self, args: Sequence[str], cwd: Path | str | None = None) -> CommandResult:
        argv = [*self.command, *[str(item) for item in args]]
        logger.debug("engine exec cwd=%s argv=%s", cwd, shlex.join(argv))
        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd is not None else None,
                env=build_engine_env(),
                shell=False,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as exc:
            raise ProcessLaunchFailure(argv, exc.strerror or str(exc)) from exc
        logger.debug("engine exit code=%s argv0=%s", completed.returncode, argv[0])
        return CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def run(self, args: Sequence[str], cwd: Path | str | None = None) -> dict[str, Any]:
        result = self.execute(args, cwd=cwd)
        if result.returncode != 0:
            raise ProcessExitFailure(
                [*self.command, *args],
                result.returncode,
                result.stdout,
                result.stderr,
            )
        return extract_payload(result.stdout, result.stderr)
