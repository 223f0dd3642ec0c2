from bundle_smoke.adapters.errors import AdapterError, CommandNotFound


def test_adapter_error_has_message_and_details():
    err = CommandNotFound("boom", details={"argv": ["x"]}, hint="build it")
    assert str(err) == "boom"
    assert err.details["argv"] == ["x"]
    assert err.hint == "build it"
    assert isinstance(err, AdapterError)
