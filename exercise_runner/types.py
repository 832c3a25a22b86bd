"""
Type definitions for the exercise runner.

Defines exercise descriptors, the closed set of exercise kinds, the program
configuration and the terminal result of a pipeline run.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .reporting import ConsoleReporter, Reporter


SOURCE_SUFFIX = ".hs"
GENERATED_DIR_NAME = "generated_files"
DEFAULT_EXERCISES_DIR = "src/exercises"
DEFAULT_PROGRAM_NAME = "exercise-runner"


class RunResult(str, Enum):
    """Terminal outcome of one pipeline invocation."""
    COMPILE_ERROR = "compile_error"
    TEST_FAILED = "test_failed"
    RUN_SUCCESS = "run_success"


@dataclass(frozen=True)
class CompileOnly:
    """Exercise that only needs to compile."""


@dataclass(frozen=True)
class UnitTests:
    """Exercise whose executable is a test suite; exit status decides the result."""


@dataclass(frozen=True)
class Executable:
    """
    Interactive exercise.

    Attributes:
        inputs: Lines written to the program's standard input, in order
        output_check: Predicate over the program's standard output lines
    """
    inputs: Tuple[str, ...] = ()
    output_check: Callable[[List[str]], bool] = field(default=lambda lines: not lines, compare=False)


ExerciseKind = Union[CompileOnly, UnitTests, Executable]


def is_runnable(kind: ExerciseKind) -> bool:
    """Whether the build should produce an executable for this kind."""
    return not isinstance(kind, CompileOnly)


@dataclass(frozen=True)
class ExerciseDescriptor:
    """
    One exercise as supplied by the catalog.

    Attributes:
        name: Exercise name, also the module name (e.g. 'Types1')
        directory: Source directory relative to the exercises directory
        kind: Which post-build behavior applies
        hint: Optional hint text shown by catalog consumers
    """
    name: str
    directory: str
    kind: ExerciseKind = field(default_factory=CompileOnly)
    hint: Optional[str] = None

    @property
    def source_filename(self) -> str:
        return source_filename(self.name)

    @property
    def module_name(self) -> str:
        return module_name(self.source_filename)


def source_filename(exercise_name: str) -> str:
    """File name of an exercise's source file."""
    return exercise_name + SOURCE_SUFFIX


def module_name(filename: str) -> str:
    """Module name for a source file name: the name without its extension."""
    return Path(filename).stem


@dataclass
class ProgramConfig:
    """
    Configuration shared by every pipeline invocation.

    Attributes:
        project_root: Root directory holding exercises and generated files
        ghc_path: Path to the compiler executable
        package_db: Package database passed to the compiler
        exercises_dir: Exercises directory relative to project_root
        program_name: Command name shown in re-run hints
        reporter: Sink for learner-facing output
    """
    project_root: Path
    ghc_path: str
    package_db: str
    exercises_dir: str = DEFAULT_EXERCISES_DIR
    program_name: str = DEFAULT_PROGRAM_NAME
    reporter: Reporter = field(default_factory=ConsoleReporter)
