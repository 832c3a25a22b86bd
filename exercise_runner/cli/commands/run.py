"""Run and check command implementations."""

import logging
from argparse import Namespace
from pathlib import Path
from typing import Tuple

from exercise_runner.catalog import CATALOG_FILENAME, Catalog, load_catalog
from exercise_runner.config import load_config
from exercise_runner.exceptions import ConfigValidationError, ExerciseRunnerError
from exercise_runner.pipeline import PipelineController
from exercise_runner.reporting import ConsoleReporter
from exercise_runner.types import ProgramConfig, RunResult


logger = logging.getLogger(__name__)


def setup_logging(args: Namespace) -> None:
    """Configure logging from the common CLI flags."""
    log_level = getattr(logging, args.log_level.upper().replace('WARN', 'WARNING'))
    if args.debug:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def load_project(args: Namespace) -> Tuple[ProgramConfig, Catalog]:
    """Load config.yaml and the exercise catalog for the project root in args."""
    root = Path(args.root).resolve()
    config_path = Path(args.config).resolve() if args.config else None
    catalog_path = Path(args.catalog).resolve() if args.catalog else root / CATALOG_FILENAME

    reporter = ConsoleReporter(no_color=args.no_color)
    config = load_config(root, config_path, reporter)
    catalog = load_catalog(catalog_path)
    logger.debug(f"Loaded {len(catalog)} exercises from {catalog_path}")
    return config, catalog


def report_configuration_error(error: ConfigValidationError) -> int:
    for item in error.errors:
        where = f" ({item.path})" if item.path else ""
        logger.error(f"Validation error{where}: {item.message}")
    return error.exit_code


def run_exercise(args: Namespace) -> int:
    """
    Run one exercise through the pipeline.

    Returns:
        0 on RUN_SUCCESS, 1 on a compile or test failure, 2 on configuration errors
    """
    setup_logging(args)

    try:
        config, catalog = load_project(args)
        descriptor = catalog.get(args.exercise)
        if descriptor is None:
            config.reporter.failure(f"Unknown exercise: {args.exercise}")
            return 1

        controller = PipelineController(config)
        result = controller.run(descriptor)
        return 0 if result == RunResult.RUN_SUCCESS else 1

    except ConfigValidationError as e:
        return report_configuration_error(e)
    except ExerciseRunnerError as e:
        logger.error(str(e))
        return e.exit_code
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1


def check_exercises(args: Namespace) -> int:
    """
    Run every catalog exercise in order and print a summary.

    Returns:
        0 if every exercise passed, 1 if any failed, 2 on configuration errors
    """
    setup_logging(args)

    try:
        config, catalog = load_project(args)
        controller = PipelineController(config)
        results = controller.run_all(catalog)

        passed = [name for name, result in results.items() if result == RunResult.RUN_SUCCESS]
        failed = [name for name in results if name not in passed]

        reporter = config.reporter
        reporter.line("")
        reporter.line(f"{len(passed)}/{len(results)} exercises passed")
        for name in failed:
            reporter.failure(f"  {name}: {results[name].value}")

        return 0 if not failed else 1

    except ConfigValidationError as e:
        return report_configuration_error(e)
    except ExerciseRunnerError as e:
        logger.error(str(e))
        return e.exit_code
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1
