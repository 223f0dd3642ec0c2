from dataclasses import dataclass

from bundle_smoke.domain.json_types import JsonDict


@dataclass
class AdapterError(Exception):
    message: str
    details: JsonDict | None = None
    hint: str | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


class CommandNotFound(AdapterError):
    pass


class CommandNotExecutable(AdapterError):
    pass


class CommandTimeout(AdapterError):
    pass
