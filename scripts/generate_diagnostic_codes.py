#!/usr/bin/env python3
from __future__ import annotations

from pathlib import Path
from typing import TypeGuard

import yaml


REPO_ROOT = Path(__file__).resolve().parents[1]
CODES_PATH = Path(
    "services", "bundle_smoke", "src", "bundle_smoke", "diagnostics", "codes.yaml"
)


def _is_dict(value: object) -> TypeGuard[dict[object, object]]:
    return isinstance(value, dict)


def _is_list(value: object) -> TypeGuard[list[object]]:
    return isinstance(value, list)


def _as_dict(value: object) -> dict[str, object]:
    if not _is_dict(value):
        return {}
    return {str(k): v for k, v in value.items()}


def load_codes(src: Path) -> list[dict[str, object]]:
    if not src.exists():
        raise SystemExit(f"Diagnostics source not found: {src}")

    raw: object = yaml.safe_load(src.read_text(encoding="utf-8")) or {}
    data = _as_dict(raw)
    if data.get("version") != 1:
        raise SystemExit(f"Unsupported diagnostics version: {data.get('version')}")

    raw_codes = data.get("codes")
    if not _is_list(raw_codes):
        raise SystemExit("Invalid codes.yaml: expected top-level 'codes' list")
    codes: list[dict[str, object]] = []
    for entry in raw_codes:
        if not _is_dict(entry):
            raise SystemExit("Invalid codes.yaml: entries must be mappings")
        item = _as_dict(entry)
        if not all(str(item.get(key) or "").strip() for key in ("code", "severity", "rule")):
            raise SystemExit(
                f"Invalid diagnostic entry (missing required fields): {item}"
            )
        codes.append(item)
    return codes


def _cell(item: dict[str, object], key: str) -> str:
    return str(item.get(key) or "").strip().replace("\n", " ").replace("|", "\\|")


def render(codes: list[dict[str, object]]) -> str:
    lines = [
        "> **Generated file. Do not edit directly.**",
        "> Run: `python scripts/generate_diagnostic_codes.py`",
        "",
        "# Diagnostic codes",
        "",
        f"This page is generated from `{CODES_PATH.as_posix()}`.",
        "",
        "| Code | Severity | Rule | Message | Hint |",
        "|---|---|---|---|---|",
    ]
    for item in sorted(codes, key=lambda x: str(x.get("code", ""))):
        lines.append(
            f"| `{_cell(item, 'code')}` | `{_cell(item, 'severity')}` "
            f"| `{_cell(item, 'rule')}` | {_cell(item, 'message')} "
            f"| {_cell(item, 'hint')} |"
        )
    return "\n".join(lines) + "\n"


def generate(repo_root: Path = REPO_ROOT) -> Path:
    codes = load_codes(repo_root / CODES_PATH)
    out = repo_root / "docs" / "reference" / "diagnostic-codes.md"
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(render(codes), encoding="utf-8")
    print(f"Generated {out}")
    return out


if __name__ == "__main__":
    generate()
