from depexec.domain.command import AllowErr, Command, ExceptionText, RawCommand, render_command
from depexec.domain.failure import CmdFailure, LaunchErrorKind


def test_args_are_normalised_to_tuples():
    cmd = Command("gradlew", ["dependencies", "--quiet"])
    assert cmd.args == ("dependencies", "--quiet")
    assert cmd == Command("gradlew", ("dependencies", "--quiet"), AllowErr.NEVER)
    assert hash(cmd) == hash(Command("gradlew", ("dependencies", "--quiet")))


def test_allow_err_accepts_plain_values():
    assert Command("npm", [], "non_empty_stdout").allow_err is AllowErr.NON_EMPTY_STDOUT


def test_render_command_joins_name_and_args():
    assert render_command(Command("pip", ["list", "--format", "json"])) == "pip list --format json"
    assert render_command(RawCommand("./gradlew", [])) == "./gradlew"


def test_commands_sort_deterministically():
    cmds = [
        Command("pip", ["list"]),
        Command("npm", ["ls"], AllowErr.ALWAYS),
        Command("npm", ["ls"]),
    ]
    assert sorted(cmds) == sorted(reversed(cmds))
    assert sorted([RawCommand("b"), RawCommand("a")])[0] == RawCommand("a")
    assert ExceptionText("a") < ExceptionText("b")


def test_cmd_failures_are_totally_ordered():
    base = CmdFailure(Command("pip"), "/repo", 1, b"", b"boom")
    launched = CmdFailure(
        Command("pip"), "/repo", 1, b"", b"boom", launch_error=LaunchErrorKind.NOT_FOUND
    )
    assert base < launched
    assert sorted([launched, base]) == [base, launched]
    assert base != launched
