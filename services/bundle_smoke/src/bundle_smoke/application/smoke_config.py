from __future__ import annotations

import json
import logging
import shlex
from dataclasses import replace
from pathlib import Path

import jsonschema
import yaml

from bundle_smoke.domain.diagnostics import Diagnostic, FileLocation, Severity
from bundle_smoke.domain.json_types import (
    JsonDict,
    JsonValue,
    as_json_dict,
    as_json_list,
)
from bundle_smoke.domain.result import Result
from bundle_smoke.domain.smoke_case import (
    DEFAULT_EXPECTED,
    DEFAULT_RUNTIME,
    SmokeCase,
    case_name_for_binary,
    default_case,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "bundle-smoke.yaml"
SCHEMA_PATH = (
    Path(__file__).resolve().parents[1] / "schemas" / "smoke-config.schema.v1.json"
)

ConfigDict = JsonDict


def find_config(cwd: Path, explicit: Path | None = None) -> Path | None:
    if explicit is not None:
        return explicit if explicit.is_absolute() else cwd / explicit
    candidate = cwd / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def parse_command(value: JsonValue) -> list[str]:
    if isinstance(value, str):
        return shlex.split(value)
    return [str(item) for item in as_json_list(value)]


def _schema_diagnostics(config: ConfigDict, path: Path) -> list[Diagnostic]:
    schema = as_json_dict(json.loads(SCHEMA_PATH.read_text(encoding="utf-8")))
    validator = jsonschema.Draft202012Validator(schema)
    diagnostics: list[Diagnostic] = []
    errors = validator.iter_errors(config)
    for error in sorted(errors, key=lambda e: [str(p) for p in e.absolute_path]):
        where = "/".join(str(p) for p in error.absolute_path) or "<root>"
        diagnostics.append(
            Diagnostic(
                code="CONFIG_SCHEMA_INVALID",
                rule="config.schema",
                severity=Severity.ERROR,
                message=f"{where}: {error.message}",
                location=FileLocation(str(path)),
            )
        )
    return diagnostics


def read_config(path: Path) -> Result[ConfigDict]:
    if not path.is_file():
        return Result(
            diagnostics=[
                Diagnostic(
                    code="CONFIG_MISSING",
                    rule="config.exists",
                    severity=Severity.ERROR,
                    message=f"Config file not found: {path}",
                    location=FileLocation(str(path)),
                )
            ]
        )
    try:
        raw: object = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        line = col = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line, col = mark.line + 1, mark.column + 1
        return Result(
            diagnostics=[
                Diagnostic(
                    code="CONFIG_PARSE_FAILED",
                    rule="config.parse",
                    severity=Severity.ERROR,
                    message=str(e),
                    location=FileLocation(str(path), line, col),
                )
            ]
        )
    if not isinstance(raw, dict):
        return Result(
            diagnostics=[
                Diagnostic(
                    code="CONFIG_SCHEMA_INVALID",
                    rule="config.schema",
                    severity=Severity.ERROR,
                    message="Config must be a mapping",
                    location=FileLocation(str(path)),
                )
            ]
        )
    config = as_json_dict(raw)
    diagnostics = _schema_diagnostics(config, path)
    if diagnostics:
        return Result(diagnostics=diagnostics)
    return Result(value=config)


def _timeout(value: JsonValue) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None


def cases_from_config(config: ConfigDict, base_dir: Path) -> Result[list[SmokeCase]]:
    runtime = (
        parse_command(config["runtime"])
        if "runtime" in config
        else list(DEFAULT_RUNTIME)
    )
    expected = str(config.get("expected", DEFAULT_EXPECTED))
    timeout = _timeout(config.get("timeout"))

    raw_cases = as_json_list(config.get("cases"))
    if not raw_cases:
        case = default_case(base_dir)
        return Result(
            value=[replace(case, runtime=runtime, expected=expected, timeout=timeout)]
        )

    cases: list[SmokeCase] = []
    diagnostics: list[Diagnostic] = []
    seen: set[str] = set()
    for entry in raw_cases:
        entry_dict = as_json_dict(entry)
        binary = str(entry_dict.get("binary"))
        name = str(entry_dict.get("name") or case_name_for_binary(binary))
        if name in seen:
            diagnostics.append(
                Diagnostic(
                    code="CONFIG_CASE_DUPLICATE",
                    rule="config.cases",
                    severity=Severity.ERROR,
                    message=f"Duplicate case name: {name}",
                    hint="Give each case a unique 'name'.",
                )
            )
            continue
        seen.add(name)
        cases.append(
            SmokeCase(
                name=name,
                binary=binary,
                args=[str(a) for a in as_json_list(entry_dict.get("args"))],
                runtime=(
                    parse_command(entry_dict["runtime"])
                    if "runtime" in entry_dict
                    else list(runtime)
                ),
                expected=str(entry_dict.get("expected", expected)),
                cwd=base_dir,
                timeout=(
                    _timeout(entry_dict.get("timeout"))
                    if "timeout" in entry_dict
                    else timeout
                ),
            )
        )
    if diagnostics:
        return Result(diagnostics=diagnostics)
    return Result(value=cases)


def _binary_case_names(binaries: list[str]) -> list[tuple[str, str]]:
    # Named after the file; the path as given when two files share a name.
    names = [case_name_for_binary(b) for b in binaries]
    return [
        (name if names.count(name) == 1 else b, b)
        for name, b in zip(names, binaries)
    ]


def load_cases(
    cwd: Path,
    *,
    config_path: Path | None = None,
    binaries: list[str] | None = None,
    runtime: str | None = None,
    expected: str | None = None,
    timeout: float | None = None,
) -> Result[list[SmokeCase]]:
    """Build the cases to run from defaults, the config file and overrides.

    Overrides (command line or environment) win over the config file, which
    wins over the built-in defaults. Binaries given as overrides replace the
    configured cases but inherit the configured runtime and expectation.
    """
    path = find_config(cwd, config_path)
    if path is None:
        config: ConfigDict = {"version": 1}
        base_dir = cwd
    else:
        logger.debug("loading config from %s", path)
        config_result = read_config(path)
        if config_result.value is None:
            return Result(diagnostics=config_result.diagnostics)
        config = config_result.value
        base_dir = path.parent

    if binaries:
        config = dict(config)
        config["cases"] = [
            {"name": name, "binary": b} for name, b in _binary_case_names(binaries)
        ]
        base_dir = cwd

    cases_result = cases_from_config(config, base_dir)
    if cases_result.value is None:
        return cases_result

    overrides: dict[str, object] = {}
    if runtime is not None:
        overrides["runtime"] = shlex.split(runtime)
    if expected is not None:
        overrides["expected"] = expected
    if timeout is not None:
        overrides["timeout"] = timeout
    if not overrides:
        return cases_result
    return Result(value=[replace(case, **overrides) for case in cases_result.value])
