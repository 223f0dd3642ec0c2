from __future__ import annotations

from pathlib import Path
import stat
from typing import Callable

import pytest

JS_OK = 'console.log("bibble wibble")'

# Stands in for node: prints the argument of each console.log("...") line read
# from stdin and fails on anything else, the way a syntax error would.
FAKE_NODE = r"""status=0
while IFS= read -r line; do
  case "$line" in
    'console.log("'*'")') printf '%s\n' "$line" | sed 's/^console\.log("\(.*\)")$/\1/' ;;
    '') ;;
    *) echo "SyntaxError: $line" >&2; status=1 ;;
  esac
done
exit "$status"
"""


def write_script(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n" + body + "\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def make_script(tmp_path: Path) -> Callable[[str, str], Path]:
    def _make(relpath: str, body: str) -> Path:
        return write_script(tmp_path / relpath, body)

    return _make


@pytest.fixture
def fake_node(tmp_path: Path) -> Path:
    return write_script(tmp_path / "bin" / "fake-node", FAKE_NODE)


@pytest.fixture
def bundler(tmp_path: Path) -> Path:
    return write_script(
        tmp_path / "target" / "debug" / "please-bundle", f"echo '{JS_OK}'"
    )
