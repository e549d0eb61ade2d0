import pytest

from depexec.application.context import ExecFatal, context, fatal
from depexec.domain.exec_errors import RawExitFailure


def test_frames_read_outermost_first():
    with pytest.raises(ExecFatal) as exc:
        with context("Analyzing gradle project"):
            with context("Running command 'gradlew dependencies'"):
                fatal(RawExitFailure(1))
    assert exc.value.frames == [
        "Analyzing gradle project",
        "Running command 'gradlew dependencies'",
    ]
    assert exc.value.error == RawExitFailure(1)


def test_render_includes_frames_and_error():
    with pytest.raises(ExecFatal) as exc:
        with context("Running command 'pip'"):
            fatal(RawExitFailure(7))
    text = exc.value.render()
    assert text.splitlines()[0] == "while: Running command 'pip'"
    assert text.endswith("Failed to run command. Exit code: 7.")
    assert str(exc.value) == text


def test_other_exceptions_pass_through_untouched():
    with pytest.raises(KeyError):
        with context("label"):
            raise KeyError("x")
