"""
Pipeline controller: compile an exercise, then run whatever its kind requires.

Implements the two-stage flow

    build -> failure -> COMPILE_ERROR
          -> success -> strategy for the exercise kind -> RUN_SUCCESS | TEST_FAILED

with all learner-facing output going through the configured reporter.
"""

import logging
from typing import Dict, Iterable, Optional

from .exceptions import ToolchainNotFoundError
from .exec.build import BuildOutcome, BuildPlan, BuildStep, working_directory
from .exec.process import ProcessRunner, StreamMode
from .exec.strategies import run_strategy
from .types import ExerciseDescriptor, ProgramConfig, RunResult


logger = logging.getLogger(__name__)


class PipelineController:
    """
    Runs exercises through the compile-then-execute pipeline.

    Each call builds a fresh BuildPlan; nothing is carried over between
    invocations.
    """

    def __init__(self, config: ProgramConfig, runner: Optional[ProcessRunner] = None):
        """
        Initialize the controller.

        Args:
            config: Program configuration, including the reporter
            runner: Process runner (default: a new ProcessRunner)
        """
        self.config = config
        self.runner = runner or ProcessRunner()
        self.build_step = BuildStep(config, self.runner)

    def run(self, descriptor: ExerciseDescriptor) -> RunResult:
        """
        Compile the exercise and run its post-build strategy.

        Args:
            descriptor: Exercise to run

        Returns:
            The terminal RunResult

        Raises:
            ToolchainNotFoundError: If the compiler cannot be started
        """
        plan = BuildPlan.create(self.config, descriptor)
        reporter = self.config.reporter
        logger.debug(f"Build command for {descriptor.name}: {plan.command}")

        with working_directory(plan.generated_dir):
            build = self._build(plan)
            if not build.succeeded:
                return RunResult.COMPILE_ERROR

            reporter.success(f"Successfully compiled : {plan.source_filename}")
            result = run_strategy(self.config, plan, descriptor.kind, self.runner)

        logger.info(f"{descriptor.name}: {result.value}")
        return result

    def run_and_report(self, descriptor: ExerciseDescriptor) -> None:
        """Run the pipeline for its reporting side effects only."""
        self.run(descriptor)

    def run_all(self, descriptors: Iterable[ExerciseDescriptor]) -> Dict[str, RunResult]:
        """
        Run several exercises one after another.

        Returns:
            Mapping of exercise name to RunResult, in run order
        """
        results: Dict[str, RunResult] = {}
        for descriptor in descriptors:
            results[descriptor.name] = self.run(descriptor)
        return results

    def execute(self, descriptor: ExerciseDescriptor) -> int:
        """
        Compile the exercise and run it attached to the terminal.

        The executable is always produced, whatever the exercise kind, and
        runs with every stream inherited so the learner can interact with it.

        Returns:
            The program's exit code, or 1 if compilation failed
        """
        plan = BuildPlan.create(self.config, descriptor, force_executable=True)
        reporter = self.config.reporter

        with working_directory(plan.generated_dir):
            build = self._build(plan)
            if not build.succeeded:
                return 1

            reporter.success(f"Successfully compiled : {plan.source_filename}")
            reporter.line(f"----- Executing file: {plan.source_filename} -----")
            outcome = self.runner.run(
                [str(plan.executable_path)],
                stdin=StreamMode.INHERIT,
                stdout=StreamMode.INHERIT,
                stderr=StreamMode.INHERIT,
            )

        return outcome.exit_code

    def _build(self, plan: BuildPlan) -> BuildOutcome:
        try:
            return self.build_step.run(plan)
        except ToolchainNotFoundError as e:
            self.config.reporter.failure(f"Couldn't start the compiler: {e.reason}")
            self.config.reporter.failure(f"Check 'ghc_path' in your configuration (currently '{self.config.ghc_path}').")
            raise
