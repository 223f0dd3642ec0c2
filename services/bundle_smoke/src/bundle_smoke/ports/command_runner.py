from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass
class CommandResult:
    exit_code: int
    stdout: str
    stderr: str


class CommandRunnerPort(Protocol):
    def resolve(self, program: str, cwd: Path | None = None) -> str | None: ...

    def run(
        self,
        args: list[str],
        *,
        stdin: str | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult: ...
