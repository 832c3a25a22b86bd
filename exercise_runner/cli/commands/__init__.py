"""CLI command handlers."""

from .run import run_exercise, check_exercises
from .execute import execute_exercise

__all__ = ['run_exercise', 'check_exercises', 'execute_exercise']
