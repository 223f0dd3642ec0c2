from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bundle_smoke.domain.json_types import JsonDict, as_json_dict
from bundle_smoke.domain.smoke_case import SmokeCase


class CaseStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass(frozen=True)
class CaseOutcome:
    case: SmokeCase
    status: CaseStatus
    actual: str | None = None
    bundle_size: int | None = None

    @property
    def passed(self) -> bool:
        return self.status == CaseStatus.PASSED

    def to_artifact(self) -> JsonDict:
        return as_json_dict(
            {
                "case": self.case.name,
                "binary": self.case.binary,
                "args": self.case.args,
                "runtime": self.case.runtime,
                "status": self.status.value,
                "expected": self.case.expected,
                "actual": self.actual,
                "bundle_size": self.bundle_size,
            }
        )
