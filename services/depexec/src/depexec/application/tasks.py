from __future__ import annotations

import asyncio
from typing import Iterable

from depexec.domain.command import Command, ExceptionText, RawCommand
from depexec.domain.failure import CmdFailure
from depexec.domain.outcome import Outcome
from depexec.ports.exec import Directory, ExecPort


async def run_in_task(
    exec_port: ExecPort, directory: Directory, command: Command
) -> Outcome[bytes, CmdFailure]:
    """Run one blocking invocation on a worker thread.

    There is no deadline here. Cancelling the awaiting task does not stop
    the child process, which keeps its worker thread until it exits.
    """
    return await asyncio.to_thread(exec_port.run, directory, command)


async def run_raw_in_task(
    exec_port: ExecPort, directory: Directory, command: RawCommand
) -> Outcome[int, ExceptionText]:
    return await asyncio.to_thread(exec_port.run_raw, directory, command)


async def run_many(
    exec_port: ExecPort, invocations: Iterable[tuple[Directory, Command]]
) -> list[Outcome[bytes, CmdFailure]]:
    return list(
        await asyncio.gather(
            *(run_in_task(exec_port, directory, command) for directory, command in invocations)
        )
    )


async def run_many_raw(
    exec_port: ExecPort, invocations: Iterable[tuple[Directory, RawCommand]]
) -> list[Outcome[int, ExceptionText]]:
    return list(
        await asyncio.gather(
            *(
                run_raw_in_task(exec_port, directory, command)
                for directory, command in invocations
            )
        )
    )
