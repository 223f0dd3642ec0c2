from pathlib import Path
import json as _json
import logging
import shlex

import typer

from bundle_smoke.adapters.command_runner.subprocess_runner import (
    SubprocessCommandRunner,
)
from bundle_smoke.application.result_serialization import serialize_result
from bundle_smoke.application.run_smoke import run_suite
from bundle_smoke.application.smoke_config import load_cases
from bundle_smoke.domain.determinism import is_deterministic
from bundle_smoke.domain.outcome import CaseStatus
from bundle_smoke.domain.result import EXIT_CHECK_FAILED, EXIT_PASSED, Result
from bundle_smoke.logging import configure_logging, log_diagnostic, parse_level

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Smoke-test a JavaScript bundler.")

PASS_WORD = "yay"
FAIL_WORD = "boo"

_CASE_WORDS = {
    CaseStatus.PASSED: PASS_WORD,
    CaseStatus.FAILED: FAIL_WORD,
    CaseStatus.ERROR: "error",
}


def _log_level(value: str) -> str:
    try:
        parse_level(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))
    return value


def _setup_logging(log_level: str, debug: bool, color: bool) -> None:
    configure_logging(parse_level(log_level), debug_mode=debug, color=color)


def _emit_json(result: Result, command: str, args: list[str]) -> None:
    data = serialize_result(result, command=command, args=args)
    typer.echo(_json.dumps(data, sort_keys=is_deterministic()))


@app.command()
def run(
    binaries: list[str] = typer.Argument(
        None, help="Bundler binaries to check. Replaces the configured cases."
    ),
    runtime: str | None = typer.Option(
        None, "--runtime", envvar="BUNDLE_SMOKE_RUNTIME", help="Runtime command."
    ),
    expect: str | None = typer.Option(
        None, "--expect", envvar="BUNDLE_SMOKE_EXPECTED", help="Expected output."
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", envvar="BUNDLE_SMOKE_TIMEOUT", min=0.001
    ),
    config: Path | None = typer.Option(None, "--config", envvar="BUNDLE_SMOKE_CONFIG"),
    strict: bool = typer.Option(False, "--strict/--no-strict"),
    json: bool = False,
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="BUNDLE_SMOKE_LOG_LEVEL", callback=_log_level
    ),
    debug: bool = False,
    color: bool = typer.Option(True, "--color/--no-color"),
):
    """Run each bundler, evaluate its output and compare it with the expectation."""
    _setup_logging(log_level, debug, color)
    args = list(binaries or [])

    cases_result = load_cases(
        Path.cwd(),
        config_path=config,
        binaries=args,
        runtime=runtime,
        expected=expect,
        timeout=timeout,
    )
    if cases_result.value is None:
        for diag in cases_result.diagnostics:
            log_diagnostic(logger, diag)
        if json:
            _emit_json(cases_result, "run", args)
        raise typer.Exit(cases_result.exit_code)

    result = run_suite(cases_result.value, SubprocessCommandRunner(), strict=strict)
    for diag in result.diagnostics:
        log_diagnostic(logger, diag)

    if json:
        _emit_json(result, "run", args)
        raise typer.Exit(result.exit_code)

    outcomes = result.value or []
    if len(outcomes) > 1:
        for outcome in outcomes:
            typer.echo(f"{outcome.case.name}: {_CASE_WORDS[outcome.status]}")
    if result.exit_code == EXIT_PASSED:
        typer.echo(PASS_WORD)
    elif result.exit_code == EXIT_CHECK_FAILED:
        typer.echo(FAIL_WORD)
    raise typer.Exit(result.exit_code)


@app.command()
def check_config(
    path: Path | None = typer.Argument(None, help="Defaults to ./bundle-smoke.yaml."),
    json: bool = False,
):
    """Validate the configuration and list the cases it defines."""
    _setup_logging("WARNING", False, True)
    result = load_cases(Path.cwd(), config_path=path)
    for diag in result.diagnostics:
        log_diagnostic(logger, diag)

    if json:
        payload = Result(diagnostics=result.diagnostics)
        for case in result.value or []:
            payload.artifacts.append(
                {
                    "case": case.name,
                    "binary": case.binary,
                    "args": list(case.args),
                    "runtime": list(case.runtime),
                    "expected": case.expected,
                    "timeout": case.timeout,
                }
            )
        _emit_json(payload, "check-config", [str(path)] if path else [])
    else:
        for case in result.value or []:
            typer.echo(
                f"{case.name}: {shlex.join(case.bundler_argv)} | "
                f"{shlex.join(case.runtime)} | {case.expected!r}"
            )
    raise typer.Exit(result.exit_code)
