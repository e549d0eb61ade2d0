from __future__ import annotations

import logging
import os
from pathlib import Path
import subprocess

from depexec.adapters.filesystem.current_dir import ProcessCurrentDir
from depexec.domain.command import Command, ExceptionText, RawCommand, render_command
from depexec.domain.failure import LAUNCH_FAILURE_EXIT_CODE, CmdFailure, LaunchErrorKind
from depexec.domain.outcome import Err, Ok, Outcome
from depexec.domain.tolerance import apply_policy
from depexec.ports.current_dir import CurrentDirPort
from depexec.ports.exec import Directory

logger = logging.getLogger(__name__)


class SubprocessExec:
    """Runs commands as real child processes.

    Holds no mutable state: the working directory is resolved per call and
    handed to the child explicitly, so concurrent callers never race on the
    process-wide current directory.
    """

    def __init__(
        self,
        current_dir: CurrentDirPort | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self.current_dir = current_dir or ProcessCurrentDir()
        self.env = env

    def resolve_directory(self, directory: Directory) -> Path:
        path = Path(os.fspath(directory))
        if path.is_absolute():
            return path
        return self.current_dir.get_current_dir() / path

    def _environment(self) -> dict[str, str] | None:
        if self.env is None:
            return None
        environment = os.environ.copy()
        environment.update(self.env)
        return environment

    def run(self, directory: Directory, command: Command) -> Outcome[bytes, CmdFailure]:
        cwd = str(self.resolve_directory(directory))
        logger.debug("running %r in %s", render_command(command), cwd)
        try:
            proc = subprocess.run(
                [command.name, *command.args],
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                check=False,
                env=self._environment(),
            )
        except OSError as exc:
            kind = LaunchErrorKind.from_os_error(exc, cwd)
            logger.warning(
                "could not start %r in %s (%s): %s", command.name, cwd, kind.value, exc
            )
            return Err(
                CmdFailure(
                    command=command,
                    directory=cwd,
                    exit_code=LAUNCH_FAILURE_EXIT_CODE,
                    stdout=b"",
                    stderr=str(exc).encode("utf-8"),
                    launch_error=kind,
                )
            )
        logger.debug("%r exited with %d", command.name, proc.returncode)
        return apply_policy(command, cwd, proc.returncode, proc.stdout, proc.stderr)

    def run_raw(
        self, directory: Directory, command: RawCommand
    ) -> Outcome[int, ExceptionText]:
        cwd = str(self.resolve_directory(directory))
        logger.debug("running %r in %s with inherited stdio", render_command(command), cwd)
        try:
            proc = subprocess.run(
                [command.name, *command.args],
                cwd=cwd,
                check=False,
                env=self._environment(),
            )
        except OSError as exc:
            logger.warning("could not start %r in %s: %s", command.name, cwd, exc)
            return Err(ExceptionText(str(exc)))
        return Ok(proc.returncode)
