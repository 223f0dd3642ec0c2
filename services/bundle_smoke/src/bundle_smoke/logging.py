"""Console logging for the bundle-smoke CLI.

Records go to stderr through Rich so that stdout carries only the verdict
(or the JSON result). Third-party records are tagged with a short prefix.
"""

from __future__ import annotations

import logging
from typing import Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

from bundle_smoke.domain.diagnostics import Diagnostic, Severity

PROJECT_PREFIX = "bundle_smoke"

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]

_SEVERITY_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARN: logging.WARNING,
    Severity.INFO: logging.INFO,
}


class ThirdPartyPrefixFilter(logging.Filter):
    """Set ``record.prefix`` to ``[package] `` for records from other libraries."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(PROJECT_PREFIX):
            record.prefix = f"[{record.name.split('.')[0]}] "
        else:
            record.prefix = ""
        return True


def config_console_handler(
    level: int = logging.WARNING, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr handler.

    Debug mode forces DEBUG level and adds timestamps, logger names and
    source paths.
    """
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    fmt = (
        "%(prefix)s%(message)s"
        if not debug_mode
        else "%(asctime)s %(name)s: %(message)s"
    )
    handler.setFormatter(logging.Formatter(fmt=fmt))
    if not debug_mode:
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def configure_logging(
    level: int = logging.WARNING, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Install a single console handler on the root logger.

    Handlers from an earlier call are removed, so repeated CLI invocations in
    one process do not duplicate output.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    handler = config_console_handler(level, debug_mode=debug_mode, color=color)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug_mode else level)
    return handler


def parse_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {name}")
    return level


def log_diagnostic(logger: logging.Logger, diag: Diagnostic) -> None:
    message = f"{diag.code}: {diag.message}"
    if diag.hint:
        message = f"{message} ({diag.hint})"
    logger.log(_SEVERITY_LEVELS[diag.severity], message)
