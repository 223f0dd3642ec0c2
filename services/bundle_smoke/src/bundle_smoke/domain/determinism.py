import os


def is_deterministic() -> bool:
    return os.getenv("BUNDLE_SMOKE_DETERMINISTIC") == "1"
