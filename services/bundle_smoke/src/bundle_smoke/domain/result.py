from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from bundle_smoke.domain.diagnostics import Diagnostic, Severity
from bundle_smoke.domain.json_types import JsonDict

T = TypeVar("T")

EXIT_PASSED = 0
EXIT_CHECK_FAILED = 1
EXIT_CONFIG_INVALID = 2
EXIT_EXECUTION_FAILED = 3

CONFIG_RULE_PREFIX = "config."


def _new_diagnostics() -> list[Diagnostic]:
    return []


def _new_artifacts() -> list[JsonDict]:
    return []


@dataclass
class Result(Generic[T]):
    value: T | None = None
    diagnostics: list[Diagnostic] = field(default_factory=_new_diagnostics)
    artifacts: list[JsonDict] = field(default_factory=_new_artifacts)

    @property
    def exit_code(self) -> int:
        errors = [d for d in self.diagnostics if d.severity == Severity.ERROR]
        if any(d.is_execution for d in errors):
            return EXIT_EXECUTION_FAILED
        if any(d.rule.startswith(CONFIG_RULE_PREFIX) for d in errors):
            return EXIT_CONFIG_INVALID
        if errors:
            return EXIT_CHECK_FAILED
        return EXIT_PASSED
