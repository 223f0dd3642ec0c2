from __future__ import annotations

from dataclasses import replace

from bundle_smoke.domain.diagnostics import Diagnostic, Severity

STRICT_HINT = "Reported as an error because --strict is enabled."


def apply_strictness(diagnostics: list[Diagnostic], strict: bool) -> list[Diagnostic]:
    """Promote upgradeable warnings to errors when running strictly.

    Promoted diagnostics keep their own hint if they have one.
    """
    if not strict:
        return diagnostics
    return [_promote(d) if _is_promotable(d) else d for d in diagnostics]


def _is_promotable(diagnostic: Diagnostic) -> bool:
    return diagnostic.severity == Severity.WARN and diagnostic.upgradeable


def _promote(diagnostic: Diagnostic) -> Diagnostic:
    return replace(
        diagnostic,
        severity=Severity.ERROR,
        hint=diagnostic.hint or STRICT_HINT,
    )
