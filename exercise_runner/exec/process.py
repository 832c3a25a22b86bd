"""
Process runner for spawning child processes and collecting their output.

Every stream can independently be inherited from the parent, discarded or
captured through a pipe. Captured streams are drained concurrently with
waiting, so a child that writes more than a pipe buffer holds cannot block
the parent.
"""

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from ..exceptions import ProcessAlreadyWaitedError, ProcessSpawnError


logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]


class StreamMode(str, Enum):
    """How a standard stream of the child is connected."""
    INHERIT = "inherit"
    DISCARD = "discard"
    PIPE = "pipe"


_POPEN_STREAMS: Dict[StreamMode, Any] = {
    StreamMode.INHERIT: None,
    StreamMode.DISCARD: subprocess.DEVNULL,
    StreamMode.PIPE: subprocess.PIPE,
}


def decode_output(data: bytes) -> str:
    """Decode captured bytes, replacing anything that is not valid UTF-8."""
    return data.decode('utf-8', errors='replace')


def split_lines(text: str) -> List[str]:
    """
    Split output into lines.

    Normalizes CRLF to LF and drops the empty entry after a trailing newline,
    so "" gives [] and "7\\n" gives ["7"].
    """
    text = text.replace('\r\n', '\n')
    lines = text.split('\n')
    if lines and lines[-1] == '':
        lines = lines[:-1]
    return lines


def encode_input_lines(lines: Sequence[str]) -> bytes:
    """Join input lines into newline-terminated bytes for a child's stdin."""
    return "".join(f"{line}\n" for line in lines).encode('utf-8')


@dataclass
class ProcessOutcome:
    """
    Exit status and captured output of a finished process.

    A stream that was not piped is None, which is distinct from a piped
    stream that produced no bytes.
    """
    exit_code: int
    stdout: Optional[bytes] = None
    stderr: Optional[bytes] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def stdout_text(self) -> Optional[str]:
        return decode_output(self.stdout) if self.stdout is not None else None

    @property
    def stderr_text(self) -> Optional[str]:
        return decode_output(self.stderr) if self.stderr is not None else None

    def stdout_lines(self) -> List[str]:
        """Stdout split into lines; an absent stream gives an empty list."""
        text = self.stdout_text
        if text is None:
            return []
        return split_lines(text)


class ProcessHandle:
    """
    A live child process.

    Owns the parent's ends of any pipes. Must be waited on exactly once;
    after that the handle is consumed.
    """

    def __init__(self, popen: subprocess.Popen, command: Command):
        self._popen = popen
        self.command = command
        self._waited = False

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def stdin_piped(self) -> bool:
        return self._popen.stdin is not None

    @property
    def consumed(self) -> bool:
        return self._waited

    def wait(self, input_lines: Optional[Sequence[str]] = None) -> ProcessOutcome:
        """
        Feed stdin, drain captured streams and wait for the child to exit.

        Args:
            input_lines: Lines to write to stdin; ignored when stdin is not piped

        Returns:
            ProcessOutcome with the exit code and captured streams

        Raises:
            ProcessAlreadyWaitedError: If the handle was already waited on
        """
        if self._waited:
            raise ProcessAlreadyWaitedError(f"Process {self.pid} has already been waited on")
        self._waited = True

        payload = None
        if self.stdin_piped:
            payload = encode_input_lines(input_lines or [])
        elif input_lines:
            logger.debug(f"stdin not piped for {self.command!r}; dropping {len(input_lines)} input lines")

        # communicate() ignores EPIPE when the child closes stdin early
        stdout, stderr = self._popen.communicate(input=payload)
        exit_code = self._popen.returncode
        logger.debug(f"Process {self.pid} exited with code {exit_code}")

        return ProcessOutcome(exit_code=exit_code, stdout=stdout, stderr=stderr)


class ProcessRunner:
    """Spawns child processes with per-stream connection modes."""

    def spawn(
        self,
        command: Command,
        stdin: StreamMode = StreamMode.INHERIT,
        stdout: StreamMode = StreamMode.INHERIT,
        stderr: StreamMode = StreamMode.INHERIT,
        shell: bool = False,
        cwd: Optional[Path] = None,
    ) -> ProcessHandle:
        """
        Start a child process.

        Args:
            command: argv list, or a command string when shell is True
            stdin: Connection mode for standard input
            stdout: Connection mode for standard output
            stderr: Connection mode for standard error
            shell: Run the command through the system shell
            cwd: Working directory (default: current directory)

        Returns:
            ProcessHandle for the running child

        Raises:
            ProcessSpawnError: If the program cannot be started
        """
        if shell and not isinstance(command, str):
            raise ValueError("Shell invocation requires a command string")
        if not shell and isinstance(command, str):
            raise ValueError("Expected an argv list when shell is False")

        logger.debug(f"Spawning command: {command}")
        try:
            popen = subprocess.Popen(
                command if shell else [str(arg) for arg in command],
                stdin=_POPEN_STREAMS[StreamMode(stdin)],
                stdout=_POPEN_STREAMS[StreamMode(stdout)],
                stderr=_POPEN_STREAMS[StreamMode(stderr)],
                shell=shell,
                cwd=str(cwd) if cwd else None,
            )
        except OSError as e:
            raise ProcessSpawnError(command, str(e)) from e

        return ProcessHandle(popen, command)

    def run(
        self,
        command: Command,
        stdin: StreamMode = StreamMode.INHERIT,
        stdout: StreamMode = StreamMode.INHERIT,
        stderr: StreamMode = StreamMode.INHERIT,
        shell: bool = False,
        cwd: Optional[Path] = None,
        input_lines: Optional[Sequence[str]] = None,
    ) -> ProcessOutcome:
        """Spawn a command and wait for it in one step."""
        handle = self.spawn(command, stdin=stdin, stdout=stdout, stderr=stderr, shell=shell, cwd=cwd)
        return handle.wait(input_lines=input_lines)
