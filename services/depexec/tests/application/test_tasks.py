import pytest

from depexec.adapters.exec.subprocess_exec import SubprocessExec
from depexec.application.tasks import run_in_task, run_many, run_many_raw, run_raw_in_task
from depexec.domain.command import Command, ExceptionText, RawCommand
from depexec.domain.outcome import Err, Ok


@pytest.mark.asyncio
async def test_run_in_task_replays(scripted_exec):
    cmd = Command("gradlew", ["dependencies"])
    exec_port = scripted_exec(("/repo", cmd, Ok(b"deps")))
    assert await run_in_task(exec_port, "/repo", cmd) == Ok(b"deps")


@pytest.mark.asyncio
async def test_run_many_runs_real_processes_concurrently(tmp_path, py):
    dirs = []
    for i in range(4):
        d = tmp_path / f"strategy{i}"
        d.mkdir()
        dirs.append(d)
    cmd = py("import os, sys; sys.stdout.write(os.path.basename(os.getcwd()))")
    outcomes = await run_many(SubprocessExec(), [(d, cmd) for d in dirs])
    assert outcomes == [Ok(d.name.encode()) for d in dirs]


@pytest.mark.asyncio
async def test_run_raw_in_task_replays(scripted_exec):
    build = RawCommand("./gradlew", ["build"])
    missing = RawCommand("./doesnotexist")
    exec_port = scripted_exec(
        ("/repo", build, Ok(0)),
        ("/repo", missing, Err(ExceptionText("no such file"))),
    )
    assert await run_raw_in_task(exec_port, "/repo", build) == Ok(0)
    assert await run_raw_in_task(exec_port, "/repo", missing) == Err(ExceptionText("no such file"))


@pytest.mark.asyncio
async def test_run_many_raw_keeps_exit_codes_in_order(tmp_path, py):
    name = py("").name
    commands = [RawCommand(name, ["-c", f"raise SystemExit({code})"]) for code in (0, 3, 5)]
    outcomes = await run_many_raw(SubprocessExec(), [(tmp_path, cmd) for cmd in commands])
    assert outcomes == [Ok(0), Ok(3), Ok(5)]
