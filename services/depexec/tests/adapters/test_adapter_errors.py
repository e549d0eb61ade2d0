from depexec.adapters.errors import AdapterError, JournalMissError


def test_adapter_error_has_message_and_details():
    err = JournalMissError("no fixture", details={"directory": "/repo"}, hint="re-record")
    assert "no fixture" in str(err)
    assert err.details["directory"] == "/repo"
    assert isinstance(err, AdapterError)
