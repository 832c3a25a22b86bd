"""Compile-then-run pipeline for small Haskell exercises."""

from .types import (
    CompileOnly,
    Executable,
    ExerciseDescriptor,
    ProgramConfig,
    RunResult,
    UnitTests,
)
from .pipeline import PipelineController

__version__ = "0.1.0"

__all__ = [
    "CompileOnly",
    "Executable",
    "ExerciseDescriptor",
    "ProgramConfig",
    "RunResult",
    "UnitTests",
    "PipelineController",
]
