from __future__ import annotations


def normalize_output(stdout: str) -> str:
    # Same as $(...) in a shell: trailing newlines go, everything else stays.
    return stdout.rstrip("\n")


def output_matches(expected: str, stdout: str) -> bool:
    return normalize_output(stdout) == expected
