"""
Post-build execution strategies.

One handler per exercise kind, selected by run_strategy after a successful
build. Each handler reports its own outcome and returns a RunResult.
"""

import logging
import shlex
from typing import List, Optional

from ..reporting import Reporter
from ..types import (
    CompileOnly,
    Executable,
    ExerciseKind,
    ProgramConfig,
    RunResult,
    UnitTests,
)
from .build import BuildPlan
from .process import ProcessOutcome, ProcessRunner, StreamMode


logger = logging.getLogger(__name__)


def _shell_command(plan: BuildPlan) -> str:
    return shlex.quote(str(plan.executable_path))


def _report_stream(reporter: Reporter, text: Optional[str]) -> None:
    if text is not None:
        reporter.failure(text)


def _report_rerun_hint(config: ProgramConfig, plan: BuildPlan) -> None:
    reporter = config.reporter
    reporter.failure("Check the Sample Input and Sample Output in the file.")
    reporter.failure(
        f"Then try running it for yourself with '{config.program_name} exec {plan.module_name}'."
    )


def run_compile_only(config: ProgramConfig, plan: BuildPlan, runner: ProcessRunner) -> RunResult:
    """Nothing runs after the build."""
    return RunResult.RUN_SUCCESS


def run_unit_tests(config: ProgramConfig, plan: BuildPlan, runner: ProcessRunner) -> RunResult:
    """
    Run the built test executable; its exit status decides the result.

    On failure both captured streams are reported, stderr first.
    """
    outcome = runner.run(
        _shell_command(plan),
        stdin=StreamMode.DISCARD,
        stdout=StreamMode.PIPE,
        stderr=StreamMode.PIPE,
        shell=True,
    )

    reporter = config.reporter
    if not outcome.succeeded:
        logger.info(f"Tests for {plan.source_filename} exited with code {outcome.exit_code}")
        reporter.failure(f"Tests failed on exercise : {plan.source_filename}")
        _report_stream(reporter, outcome.stderr_text)
        _report_stream(reporter, outcome.stdout_text)
        return RunResult.TEST_FAILED

    reporter.success(f"Successfully ran : {plan.source_filename}")
    return RunResult.RUN_SUCCESS


def _check_output(kind: Executable, outcome: ProcessOutcome, plan: BuildPlan) -> bool:
    lines: List[str] = outcome.stdout_lines()
    try:
        return bool(kind.output_check(lines))
    except Exception as e:
        logger.warning(f"Output check for {plan.source_filename} raised {type(e).__name__}: {e}")
        return False


def run_executable(
    config: ProgramConfig,
    plan: BuildPlan,
    runner: ProcessRunner,
    kind: Executable,
) -> RunResult:
    """
    Feed the exercise's inputs to the built program and check its output.

    Inputs are written one per line. A nonzero exit reports stdout then
    stderr; a zero exit applies the output predicate to stdout's lines.
    """
    handle = runner.spawn(
        _shell_command(plan),
        stdin=StreamMode.PIPE,
        stdout=StreamMode.PIPE,
        stderr=StreamMode.PIPE,
        shell=True,
    )
    if not handle.stdin_piped:
        logger.debug(f"No stdin pipe for {plan.source_filename}; inputs not sent")
    outcome = handle.wait(input_lines=list(kind.inputs))

    reporter = config.reporter
    if not outcome.succeeded:
        logger.info(f"{plan.source_filename} exited with code {outcome.exit_code}")
        reporter.failure(f"Encountered error running exercise: {plan.source_filename}")
        _report_stream(reporter, outcome.stdout_text)
        _report_stream(reporter, outcome.stderr_text)
        _report_rerun_hint(config, plan)
        return RunResult.TEST_FAILED

    if _check_output(kind, outcome, plan):
        reporter.success(f"Successfully ran : {plan.source_filename}")
        reporter.success(
            f"You can run this code for yourself with '{config.program_name} exec {plan.module_name}'."
        )
        return RunResult.RUN_SUCCESS

    reporter.failure(f"Unexpected output for exercise: {plan.source_filename}")
    _report_rerun_hint(config, plan)
    return RunResult.TEST_FAILED


def run_strategy(
    config: ProgramConfig,
    plan: BuildPlan,
    kind: ExerciseKind,
    runner: ProcessRunner,
) -> RunResult:
    """
    Dispatch to the handler for kind.

    Raises:
        TypeError: If kind is not one of CompileOnly, UnitTests, Executable
    """
    if isinstance(kind, CompileOnly):
        return run_compile_only(config, plan, runner)
    elif isinstance(kind, UnitTests):
        return run_unit_tests(config, plan, runner)
    elif isinstance(kind, Executable):
        return run_executable(config, plan, runner, kind)
    else:
        raise TypeError(f"Unknown exercise kind: {kind!r}")
