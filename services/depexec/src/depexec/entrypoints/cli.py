from pathlib import Path
import json
import logging
import os

import typer

from depexec.adapters.errors import AdapterError
from depexec.adapters.exec.journal import Journal
from depexec.application.context import ExecFatal
from depexec.application.exec_helpers import exec_throw
from depexec.application.result_serialization import serialize_failure_report
from depexec.application.settings import load_settings
from depexec.domain.command import AllowErr, Command, RawCommand, render_command
from depexec.domain.outcome import Err, Ok
from depexec.domain.result import EXECUTION_EXIT_CODE
from depexec.entrypoints.wiring import ExecSession, build_exec

app = typer.Typer(add_completion=False)

_PASSTHROUGH = {"allow_interspersed_args": False}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


def _open_session() -> ExecSession:
    loaded = load_settings(Path.cwd(), os.environ)
    if loaded.value is None:
        for diag in loaded.diagnostics:
            typer.echo(f"{diag.code}: {diag.message}", err=True)
            if diag.hint:
                typer.echo(f"  hint: {diag.hint}", err=True)
        raise typer.Exit(loaded.exit_code)
    try:
        return build_exec(loaded.value)
    except AdapterError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXECUTION_EXIT_CODE)


def _close_session(session: ExecSession) -> None:
    try:
        session.close()
    except AdapterError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXECUTION_EXIT_CODE)


@app.command(context_settings=_PASSTHROUGH)
def run(
    name: str = typer.Argument(...),
    args: list[str] = typer.Argument(None),
    directory: Path = typer.Option(Path("."), "--dir"),
    allow_err: AllowErr = typer.Option(AllowErr.NEVER, "--allow-err"),
    json_output: bool = typer.Option(False, "--json"),
):
    """Run a command, capture its output and apply the allow-err policy."""
    command = Command(name, tuple(args or ()), allow_err)
    session = _open_session()
    try:
        stdout = exec_throw(session.exec_port, directory, command)
    except ExecFatal as e:
        if json_output:
            report = serialize_failure_report(e.error, command="run", args=[name, *command.args])
            typer.echo(json.dumps(report))
        else:
            typer.echo(e.render(), err=True)
        _close_session(session)
        raise typer.Exit(EXECUTION_EXIT_CODE)
    except AdapterError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXECUTION_EXIT_CODE)
    _close_session(session)
    typer.echo(stdout.decode("utf-8", errors="replace"), nl=False)


@app.command(context_settings=_PASSTHROUGH)
def raw(
    name: str = typer.Argument(...),
    args: list[str] = typer.Argument(None),
    directory: Path = typer.Option(Path("."), "--dir"),
):
    """Run a command with inherited stdio and exit with its exit code."""
    command = RawCommand(name, tuple(args or ()))
    session = _open_session()
    try:
        outcome = session.exec_port.run_raw(directory, command)
    except AdapterError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXECUTION_EXIT_CODE)
    _close_session(session)
    if isinstance(outcome, Err):
        typer.echo(outcome.error.text, err=True)
        raise typer.Exit(EXECUTION_EXIT_CODE)
    raise typer.Exit(outcome.value)


@app.command()
def journal_show(path: Path = typer.Argument(...)):
    """List the invocations recorded in a journal."""
    try:
        journal = Journal.load(path)
    except AdapterError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(EXECUTION_EXIT_CODE)
    for (directory, invocation), outcome in journal.entries():
        status = "ok" if isinstance(outcome, Ok) else "err"
        typer.echo(f"{directory}\t{render_command(invocation)}\t{status}")
