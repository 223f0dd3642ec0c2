from bundle_smoke.domain.diagnostics import (
    CommandLocation,
    Diagnostic,
    Severity,
    has_errors,
)


def test_diagnostic_id_is_deterministic():
    d1 = Diagnostic(
        code="X",
        rule="r",
        severity=Severity.ERROR,
        message="m",
        location=CommandLocation("please-bundle", ["./target/debug/please-bundle"]),
    )
    d2 = Diagnostic(
        code="X",
        rule="r",
        severity=Severity.ERROR,
        message="m",
        location=CommandLocation("please-bundle", ("./target/debug/please-bundle",)),
    )
    assert d1.id == d2.id
    assert len(d1.id) == 12


def test_diagnostic_id_changes_with_location():
    a = Diagnostic(
        code="X", rule="r", severity=Severity.ERROR, message="m",
        location=CommandLocation("a", ["a"]),
    )
    b = Diagnostic(
        code="X", rule="r", severity=Severity.ERROR, message="m",
        location=CommandLocation("b", ["b"]),
    )
    assert a.id != b.id


def test_has_errors_ignores_warnings():
    warn = Diagnostic(code="W", rule="r", severity=Severity.WARN, message="w")
    err = Diagnostic(code="E", rule="r", severity=Severity.ERROR, message="e")
    assert not has_errors([warn])
    assert has_errors([warn, err])
