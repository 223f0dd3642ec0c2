from __future__ import annotations

import logging

from bundle_smoke.adapters.errors import (
    AdapterError,
    CommandNotExecutable,
    CommandNotFound,
    CommandTimeout,
)
from bundle_smoke.domain.diagnostics import (
    CommandLocation,
    Diagnostic,
    Severity,
    has_errors,
)
from bundle_smoke.domain.expectation import normalize_output, output_matches
from bundle_smoke.domain.outcome import CaseOutcome, CaseStatus
from bundle_smoke.domain.result import Result
from bundle_smoke.domain.smoke_case import SmokeCase
from bundle_smoke.domain.strictness import apply_strictness
from bundle_smoke.ports.command_runner import CommandResult, CommandRunnerPort

logger = logging.getLogger(__name__)

# Which stage a process belongs to, used as the diagnostic code prefix.
BUNDLER = "BUNDLER"
RUNTIME = "RUNTIME"


def _spawn_failure(
    stage: str, case: SmokeCase, argv: list[str], error: AdapterError
) -> Diagnostic:
    if isinstance(error, CommandNotFound):
        suffix = "NOT_FOUND"
    elif isinstance(error, CommandNotExecutable):
        suffix = "NOT_EXECUTABLE"
    elif isinstance(error, CommandTimeout):
        suffix = "TIMEOUT"
    else:
        suffix = "SPAWN_FAILED"
    return Diagnostic(
        code=f"{stage}_{suffix}",
        rule=f"{stage.lower()}.spawn",
        severity=Severity.ERROR,
        message=error.message,
        location=CommandLocation(case.name, argv),
        hint=error.hint,
        details=error.details,
        is_execution=True,
    )


def _exit_failure(
    stage: str, case: SmokeCase, argv: list[str], result: CommandResult
) -> Diagnostic:
    what = "Bundler" if stage == BUNDLER else "Runtime"
    return Diagnostic(
        code=f"{stage}_FAILED",
        rule=f"{stage.lower()}.exit_status",
        severity=Severity.ERROR,
        message=f"{what} exited with status {result.exit_code}",
        location=CommandLocation(case.name, argv),
        details={"exit_code": result.exit_code, "stderr": result.stderr},
    )


def _stderr_warning(
    stage: str, case: SmokeCase, argv: list[str], result: CommandResult
) -> Diagnostic | None:
    if not result.stderr.strip():
        return None
    what = "Bundler" if stage == BUNDLER else "Runtime"
    return Diagnostic(
        code=f"{stage}_STDERR",
        rule=f"{stage.lower()}.stderr",
        severity=Severity.WARN,
        message=f"{what} wrote to stderr",
        location=CommandLocation(case.name, argv),
        details={"stderr": result.stderr},
        upgradeable=True,
    )


def _mismatch(case: SmokeCase, actual: str) -> Diagnostic:
    return Diagnostic(
        code="OUTPUT_MISMATCH",
        rule="output.match",
        severity=Severity.ERROR,
        message=f"Expected {case.expected!r}, got {actual!r}",
        location=CommandLocation(case.name, case.runtime),
        details={"expected": case.expected, "actual": actual},
    )


def _finish(
    case: SmokeCase,
    diagnostics: list[Diagnostic],
    strict: bool,
    *,
    actual: str | None = None,
    bundle_size: int | None = None,
) -> Result[CaseOutcome]:
    diagnostics = apply_strictness(diagnostics, strict)
    if any(d.is_execution and d.severity == Severity.ERROR for d in diagnostics):
        status = CaseStatus.ERROR
    elif has_errors(diagnostics):
        status = CaseStatus.FAILED
    else:
        status = CaseStatus.PASSED
    outcome = CaseOutcome(
        case=case, status=status, actual=actual, bundle_size=bundle_size
    )
    logger.debug("case %s finished: %s", case.name, status.value)
    return Result(
        value=outcome, diagnostics=diagnostics, artifacts=[outcome.to_artifact()]
    )


def run_case(
    case: SmokeCase, runner: CommandRunnerPort, *, strict: bool = False
) -> Result[CaseOutcome]:
    """Run the bundler, evaluate its output with the runtime and compare.

    Collaborators that cannot be started produce execution errors and stop
    the case. A collaborator that runs but exits non-zero fails the check;
    the runtime still evaluates whatever the bundler printed.
    """
    diagnostics: list[Diagnostic] = []

    if not case.runtime or runner.resolve(case.runtime[0], case.cwd) is None:
        program = case.runtime[0] if case.runtime else "<empty>"
        diagnostics.append(
            Diagnostic(
                code="RUNTIME_NOT_FOUND",
                rule="runtime.spawn",
                severity=Severity.ERROR,
                message=f"JavaScript runtime not found: {program}",
                location=CommandLocation(case.name, case.runtime),
                hint="Install Node.js or pass --runtime.",
                is_execution=True,
            )
        )
        return _finish(case, diagnostics, strict)

    bundler_argv = case.bundler_argv
    logger.info("bundling with %s", " ".join(bundler_argv))
    try:
        bundle = runner.run(bundler_argv, cwd=case.cwd, timeout=case.timeout)
    except AdapterError as e:
        diagnostics.append(_spawn_failure(BUNDLER, case, bundler_argv, e))
        return _finish(case, diagnostics, strict)

    if bundle.exit_code != 0:
        diagnostics.append(_exit_failure(BUNDLER, case, bundler_argv, bundle))
    warning = _stderr_warning(BUNDLER, case, bundler_argv, bundle)
    if warning is not None:
        diagnostics.append(warning)

    logger.info("evaluating %d bytes with %s", len(bundle.stdout), case.runtime[0])
    try:
        evaluation = runner.run(
            case.runtime, stdin=bundle.stdout, cwd=case.cwd, timeout=case.timeout
        )
    except AdapterError as e:
        diagnostics.append(_spawn_failure(RUNTIME, case, case.runtime, e))
        return _finish(case, diagnostics, strict, bundle_size=len(bundle.stdout))

    if evaluation.exit_code != 0:
        diagnostics.append(_exit_failure(RUNTIME, case, case.runtime, evaluation))
    warning = _stderr_warning(RUNTIME, case, case.runtime, evaluation)
    if warning is not None:
        diagnostics.append(warning)

    actual = normalize_output(evaluation.stdout)
    if not output_matches(case.expected, evaluation.stdout):
        diagnostics.append(_mismatch(case, actual))

    return _finish(
        case, diagnostics, strict, actual=actual, bundle_size=len(bundle.stdout)
    )


def run_suite(
    cases: list[SmokeCase], runner: CommandRunnerPort, *, strict: bool = False
) -> Result[list[CaseOutcome]]:
    outcomes: list[CaseOutcome] = []
    result: Result[list[CaseOutcome]] = Result(value=outcomes)
    for case in cases:
        case_result = run_case(case, runner, strict=strict)
        if case_result.value is not None:
            outcomes.append(case_result.value)
        result.diagnostics.extend(case_result.diagnostics)
        result.artifacts.extend(case_result.artifacts)
    return result
