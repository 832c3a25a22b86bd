"""
Build step for compiling one exercise.

Constructs the compiler command for an exercise, runs it inside the
exercise's generated-files directory and reports compile failures.
"""

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from ..exceptions import ProcessSpawnError, ToolchainNotFoundError
from ..types import (
    GENERATED_DIR_NAME,
    ExerciseDescriptor,
    ProgramConfig,
    is_runnable,
)
from .process import ProcessRunner, StreamMode


logger = logging.getLogger(__name__)


@contextmanager
def working_directory(path: Path) -> Iterator[Path]:
    """
    Create path if needed and make it the working directory for the block.

    The previous working directory is restored on every exit path.
    """
    previous = Path.cwd()
    path.mkdir(parents=True, exist_ok=True)
    os.chdir(path)
    try:
        yield path
    finally:
        os.chdir(previous)


@dataclass(frozen=True)
class BuildPlan:
    """
    Concrete build instructions for one exercise run.

    Attributes:
        command: Compiler argv
        generated_dir: Directory receiving object, interface and executable files
        executable_path: Where the executable lands for runnable kinds
        source_filename: Exercise source file name (e.g. 'Types1.hs')
        module_name: Source file name without extension
    """
    command: List[str]
    generated_dir: Path
    executable_path: Path
    source_filename: str
    module_name: str

    @classmethod
    def create(
        cls,
        config: ProgramConfig,
        descriptor: ExerciseDescriptor,
        force_executable: bool = False,
    ) -> 'BuildPlan':
        """
        Derive the build plan from the config and an exercise descriptor.

        Args:
            config: Program configuration
            descriptor: Exercise to build
            force_executable: Emit an executable even for compile-only exercises

        Returns:
            BuildPlan for this run
        """
        root = Path(config.project_root).resolve()
        filename = descriptor.source_filename
        source_path = root / config.exercises_dir / descriptor.directory / filename
        generated_dir = root / GENERATED_DIR_NAME / descriptor.directory
        executable_path = generated_dir / descriptor.module_name

        command = [
            str(config.ghc_path),
            str(source_path),
            "-odir", str(generated_dir),
            "-hidir", str(generated_dir),
        ]
        if force_executable or is_runnable(descriptor.kind):
            command += ["-o", str(executable_path)]
        command += ["-package-db", str(config.package_db)]

        return cls(
            command=command,
            generated_dir=generated_dir,
            executable_path=executable_path,
            source_filename=filename,
            module_name=descriptor.module_name,
        )


@dataclass
class BuildOutcome:
    """Result of running the compiler."""
    succeeded: bool
    exit_code: int
    diagnostics: str = ""


class BuildStep:
    """Runs the compiler for a build plan and reports compile failures."""

    def __init__(self, config: ProgramConfig, runner: Optional[ProcessRunner] = None):
        self.config = config
        self.runner = runner or ProcessRunner()

    def run(self, plan: BuildPlan) -> BuildOutcome:
        """
        Compile the exercise described by plan.

        Stdin is inherited; stdout and stderr are captured and drained
        while waiting.

        Returns:
            BuildOutcome; on failure diagnostics holds the compiler's stderr

        Raises:
            ToolchainNotFoundError: If the compiler cannot be started
        """
        logger.info(f"Compiling {plan.source_filename}")
        try:
            outcome = self.runner.run(
                plan.command,
                stdin=StreamMode.INHERIT,
                stdout=StreamMode.PIPE,
                stderr=StreamMode.PIPE,
            )
        except ProcessSpawnError as e:
            raise ToolchainNotFoundError(e.command, e.reason) from e

        if outcome.succeeded:
            return BuildOutcome(succeeded=True, exit_code=0)

        diagnostics = outcome.stderr_text or ""
        logger.info(f"Compiler exited with code {outcome.exit_code} for {plan.source_filename}")

        reporter = self.config.reporter
        reporter.failure(f"Couldn't compile : {plan.source_filename}")
        if outcome.stderr is not None:
            reporter.failure(diagnostics)

        return BuildOutcome(succeeded=False, exit_code=outcome.exit_code, diagnostics=diagnostics)
