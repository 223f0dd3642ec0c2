from bundle_smoke.application.result_serialization import (
    DETERMINISTIC_TIMESTAMP,
    serialize_result,
)
from bundle_smoke.domain.diagnostics import (
    CommandLocation,
    Diagnostic,
    FileLocation,
    Severity,
)
from bundle_smoke.domain.result import Result


def test_result_serializes_with_schema_version():
    result = Result(
        diagnostics=[
            Diagnostic(
                code="CONFIG_PARSE_FAILED",
                rule="config.parse",
                severity=Severity.ERROR,
                message="m",
                location=FileLocation("bundle-smoke.yaml", 1, 2),
            )
        ]
    )
    data = serialize_result(result, command="run", args=[])
    assert data["result_schema_version"] == 1
    assert data["exit_code"] == 2
    assert data["diagnostics"][0]["location"]["path"] == "bundle-smoke.yaml"
    assert data["diagnostics"][0]["severity"] == "error"


def test_command_location_serializes_argv_as_list(monkeypatch):
    monkeypatch.setenv("BUNDLE_SMOKE_DETERMINISTIC", "1")
    result = Result(
        diagnostics=[
            Diagnostic(
                code="BUNDLER_NOT_FOUND",
                rule="bundler.spawn",
                severity=Severity.ERROR,
                message="missing",
                location=CommandLocation("please-bundle", ("./please-bundle", "-v")),
                is_execution=True,
            )
        ],
        artifacts=[{"case": "please-bundle", "status": "error"}],
    )
    data = serialize_result(result, command="run", args=["./please-bundle"])
    assert data["timestamp"] == DETERMINISTIC_TIMESTAMP
    assert data["exit_code"] == 3
    location = data["diagnostics"][0]["location"]
    assert location == {
        "kind": "command",
        "case": "please-bundle",
        "argv": ["./please-bundle", "-v"],
    }
    assert data["artifacts"] == [{"case": "please-bundle", "status": "error"}]
