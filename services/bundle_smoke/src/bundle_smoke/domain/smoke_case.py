from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CASE_NAME = "please-bundle"
DEFAULT_BINARY = "./target/debug/please-bundle"
DEFAULT_RUNTIME = ("node",)
DEFAULT_EXPECTED = "bibble wibble"


def _new_args() -> list[str]:
    return []


def _default_runtime() -> list[str]:
    return list(DEFAULT_RUNTIME)


@dataclass(frozen=True)
class SmokeCase:
    """One bundler binary checked against one runtime and expected output."""

    name: str
    binary: str
    args: list[str] = field(default_factory=_new_args)
    runtime: list[str] = field(default_factory=_default_runtime)
    expected: str = DEFAULT_EXPECTED
    cwd: Path | None = None
    timeout: float | None = None

    @property
    def bundler_argv(self) -> list[str]:
        return [self.binary, *self.args]


def default_case(cwd: Path | None = None) -> SmokeCase:
    return SmokeCase(name=DEFAULT_CASE_NAME, binary=DEFAULT_BINARY, cwd=cwd)


def case_name_for_binary(binary: str) -> str:
    name = Path(binary).name
    return name or binary
