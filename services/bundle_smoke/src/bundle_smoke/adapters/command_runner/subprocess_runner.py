from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from bundle_smoke.adapters.errors import (
    AdapterError,
    CommandNotExecutable,
    CommandNotFound,
    CommandTimeout,
)
from bundle_smoke.domain.json_types import as_json_dict
from bundle_smoke.ports.command_runner import CommandResult

logger = logging.getLogger(__name__)


def _text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class SubprocessCommandRunner:
    """Runs commands with :mod:`subprocess`, capturing text output."""

    def resolve(self, program: str, cwd: Path | None = None) -> str | None:
        if os.sep in program or (os.altsep and os.altsep in program):
            path = Path(program)
            if cwd is not None and not path.is_absolute():
                path = cwd / path
            return str(path) if path.is_file() else None
        return shutil.which(program)

    def run(
        self,
        args: list[str],
        *,
        stdin: str | None = None,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        details = as_json_dict({"argv": args, "cwd": str(cwd) if cwd else None})
        logger.debug("running %s (cwd=%s, timeout=%s)", args, cwd, timeout)
        try:
            completed = subprocess.run(
                args,
                input=stdin if stdin is not None else "",
                cwd=cwd,
                timeout=timeout,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise CommandNotFound(
                f"Command not found: {args[0]}",
                details=details,
                hint="Check the path, or build the binary first.",
                cause=e,
            )
        except PermissionError as e:
            raise CommandNotExecutable(
                f"Command is not executable: {args[0]}",
                details=details,
                hint=f"Try: chmod +x {args[0]}",
                cause=e,
            )
        except subprocess.TimeoutExpired as e:
            logger.debug("partial stdout before timeout: %r", _text(e.stdout))
            raise CommandTimeout(
                f"Command timed out after {timeout}s: {args[0]}",
                details=details,
                cause=e,
            )
        except OSError as e:
            # e.g. ENOEXEC: a corrupt build, or a script without a shebang
            raise AdapterError(
                f"Command could not be started: {args[0]} ({e.strerror or e})",
                details=details,
                cause=e,
            )
        logger.debug("%s exited with %s", args[0], completed.returncode)
        return CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
