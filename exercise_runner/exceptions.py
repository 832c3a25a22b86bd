"""Exercise runner exceptions."""

from typing import List, Sequence, Union
from dataclasses import dataclass


class ExerciseRunnerError(Exception):
    """Base class for errors raised by the exercise runner."""

    exit_code = 1


@dataclass
class ValidationError:
    """Single validation error."""
    message: str
    path: str = ""
    exit_code: int = 2


class ConfigValidationError(ExerciseRunnerError):
    """Raised when config.yaml or the exercise catalog fails validation.

    Carries every error found so the CLI can print them all before
    exiting with code 2.
    """

    def __init__(self, errors: List[ValidationError]):
        self.errors = errors
        self.exit_code = 2

        messages = []
        for error in errors:
            where = f" ({error.path})" if error.path else ""
            messages.append(f"Validation error{where}: {error.message}")

        super().__init__("\n".join(messages))


class ProcessSpawnError(ExerciseRunnerError):
    """Raised when a command cannot be spawned at all (missing or not executable)."""

    def __init__(self, command: Union[str, Sequence[str]], reason: str):
        self.command = command
        self.reason = reason
        program = command if isinstance(command, str) else (command[0] if command else "")
        super().__init__(f"Could not start '{program}': {reason}")


class ToolchainNotFoundError(ProcessSpawnError):
    """Raised when the compiler itself cannot be started.

    This is a configuration problem, not a compile error.
    """

    exit_code = 2


class ProcessAlreadyWaitedError(ExerciseRunnerError):
    """Raised when a process handle is waited on a second time."""
