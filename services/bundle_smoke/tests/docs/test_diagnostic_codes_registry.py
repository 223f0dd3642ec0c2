from pathlib import Path
import re

import yaml

import bundle_smoke.application.run_smoke as run_smoke

PACKAGE_ROOT = Path(run_smoke.__file__).resolve().parents[1]
STAGES = (run_smoke.BUNDLER, run_smoke.RUNTIME)
STAGE_SUFFIXES = (
    "NOT_FOUND",
    "NOT_EXECUTABLE",
    "TIMEOUT",
    "SPAWN_FAILED",
    "FAILED",
    "STDERR",
)


def _registry() -> dict[str, dict]:
    data = yaml.safe_load((PACKAGE_ROOT / "diagnostics" / "codes.yaml").read_text())
    assert data["version"] == 1
    return {entry["code"]: entry for entry in data["codes"]}


def _literal_codes() -> set[str]:
    codes: set[str] = set()
    for path in PACKAGE_ROOT.rglob("*.py"):
        codes.update(re.findall(r'code="([A-Z_]+)"', path.read_text()))
    return codes


def test_every_emitted_code_is_registered():
    registry = _registry()
    emitted = _literal_codes() | {
        f"{stage}_{suffix}" for stage in STAGES for suffix in STAGE_SUFFIXES
    }
    assert emitted - set(registry) == set()
    assert set(registry) - emitted == set()


def test_config_codes_use_config_rules():
    for code, entry in _registry().items():
        assert entry["severity"] in {"error", "warn", "info"}
        if code.startswith("CONFIG_"):
            assert entry["rule"].startswith("config.")
