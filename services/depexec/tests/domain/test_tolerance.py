import pytest

from depexec.domain.command import AllowErr, Command
from depexec.domain.failure import CmdFailure
from depexec.domain.outcome import Err, Ok
from depexec.domain.tolerance import apply_policy, decide_outcome


@pytest.mark.parametrize("exit_code", [0, 1, 2, 127, -9])
@pytest.mark.parametrize("allow_err", list(AllowErr))
@pytest.mark.parametrize("stdout", [b"", b"output"])
def test_success_iff_zero_exit_or_policy_excuses(exit_code, allow_err, stdout):
    expected = (
        exit_code == 0
        or allow_err == AllowErr.ALWAYS
        or (allow_err == AllowErr.NON_EMPTY_STDOUT and stdout != b"")
    )
    assert decide_outcome(exit_code, stdout, allow_err) is expected


def test_zero_exit_succeeds_with_stdout():
    cmd = Command("pip", ["--version"])
    assert apply_policy(cmd, "/repo", 0, b"pip 23.0", b"") == Ok(b"pip 23.0")


def test_non_empty_stdout_policy_fails_on_empty_stdout():
    cmd = Command("npm", ["install"], AllowErr.NON_EMPTY_STDOUT)
    outcome = apply_policy(cmd, "/repo", 1, b"", b"npm ERR!")
    assert outcome == Err(
        CmdFailure(
            command=cmd,
            directory="/repo",
            exit_code=1,
            stdout=b"",
            stderr=b"npm ERR!",
        )
    )


def test_non_empty_stdout_policy_succeeds_despite_exit():
    cmd = Command("npm", ["install"], AllowErr.NON_EMPTY_STDOUT)
    assert apply_policy(cmd, "/repo", 1, b"{}", b"warn") == Ok(b"{}")
