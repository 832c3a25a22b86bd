"""
Execution module for the exercise runner.
Handles process spawning, compiling exercises and running built programs.
"""

from .process import ProcessRunner, ProcessHandle, ProcessOutcome, StreamMode
from .build import BuildPlan, BuildStep, BuildOutcome, working_directory
from .strategies import run_strategy

__all__ = [
    "ProcessRunner",
    "ProcessHandle",
    "ProcessOutcome",
    "StreamMode",
    "BuildPlan",
    "BuildStep",
    "BuildOutcome",
    "working_directory",
    "run_strategy",
]
