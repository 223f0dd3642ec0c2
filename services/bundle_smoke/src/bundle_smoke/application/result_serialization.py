from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from typing import TypeVar

from bundle_smoke.domain.determinism import is_deterministic
from bundle_smoke.domain.diagnostics import Diagnostic, Location
from bundle_smoke.domain.json_types import JsonDict, as_json_dict
from bundle_smoke.domain.result import Result

T = TypeVar("T")

RESULT_SCHEMA_VERSION = 1
# Fixed so that deterministic runs produce byte-identical JSON.
DETERMINISTIC_TIMESTAMP = "1970-01-01T00:00:00+00:00"


def _serialize_location(location: Location | None) -> JsonDict | None:
    if location is None:
        return None
    if is_dataclass(location):
        return as_json_dict(asdict(location))
    return as_json_dict({"kind": str(getattr(location, "kind", "unknown"))})


def _timestamp() -> str:
    if is_deterministic():
        return DETERMINISTIC_TIMESTAMP
    return datetime.now(timezone.utc).isoformat()


def serialize_diagnostic(diag: Diagnostic) -> JsonDict:
    return as_json_dict(
        {
            "id": diag.id,
            "code": diag.code,
            "rule": diag.rule,
            "severity": diag.severity.value,
            "message": diag.message,
            "hint": diag.hint,
            "details": diag.details,
            "is_execution": diag.is_execution,
            "location": _serialize_location(diag.location),
        }
    )


def serialize_result(
    result: Result[T],
    command: str,
    args: list[str],
) -> JsonDict:
    return as_json_dict(
        {
            "result_schema_version": RESULT_SCHEMA_VERSION,
            "timestamp": _timestamp(),
            "command": command,
            "args": args,
            "exit_code": result.exit_code,
            "diagnostics": [serialize_diagnostic(d) for d in result.diagnostics],
            "artifacts": result.artifacts,
        }
    )
