"""Exec command: build an exercise and run it attached to the terminal."""

import logging
from argparse import Namespace

from exercise_runner.exceptions import ConfigValidationError, ExerciseRunnerError
from exercise_runner.pipeline import PipelineController

from .run import load_project, report_configuration_error, setup_logging


logger = logging.getLogger(__name__)


def execute_exercise(args: Namespace) -> int:
    """Returns the exercise program's exit code, 1 if it did not compile."""
    setup_logging(args)

    try:
        config, catalog = load_project(args)
        descriptor = catalog.get(args.exercise)
        if descriptor is None:
            config.reporter.failure(f"Unknown exercise: {args.exercise}")
            return 1

        return PipelineController(config).execute(descriptor)

    except ConfigValidationError as e:
        return report_configuration_error(e)
    except ExerciseRunnerError as e:
        logger.error(str(e))
        return e.exit_code
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
