from pathlib import Path

from bundle_smoke.domain.smoke_case import (
    DEFAULT_BINARY,
    DEFAULT_EXPECTED,
    SmokeCase,
    case_name_for_binary,
    default_case,
)


def test_default_case_matches_the_shell_check():
    case = default_case(Path("/repo"))
    assert case.name == "please-bundle"
    assert case.bundler_argv == [DEFAULT_BINARY]
    assert case.runtime == ["node"]
    assert case.expected == DEFAULT_EXPECTED == "bibble wibble"
    assert case.timeout is None
    assert case.cwd == Path("/repo")


def test_bundler_argv_appends_args():
    case = SmokeCase(name="js", binary="./jsbundle", args=["--entry", "main.js"])
    assert case.bundler_argv == ["./jsbundle", "--entry", "main.js"]


def test_case_name_for_binary_uses_file_name():
    assert case_name_for_binary("./target/debug/jsbundle") == "jsbundle"
    assert case_name_for_binary("jsbundle") == "jsbundle"
