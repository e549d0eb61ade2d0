from depexec.domain.diagnostics import CommandLocation, Diagnostic, FileLocation, Severity


def test_diagnostic_id_is_deterministic():
    d1 = Diagnostic(
        code="X",
        rule="r",
        severity=Severity.ERROR,
        message="m",
        location=CommandLocation("pip --version", "/repo"),
    )
    d2 = Diagnostic(
        code="X",
        rule="r",
        severity=Severity.ERROR,
        message="m",
        location=CommandLocation("pip --version", "/repo"),
    )
    assert d1.id == d2.id


def test_locations_carry_their_kind():
    assert CommandLocation("npm ls").kind == "command"
    assert FileLocation(".depexec.toml").kind == "file"
