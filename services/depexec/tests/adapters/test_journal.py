from concurrent.futures import ThreadPoolExecutor
import json
from pathlib import Path

import pytest

from depexec.adapters.errors import JournalParseError, JournalReadError
from depexec.adapters.exec.journal import Journal
from depexec.domain.command import Command, ExceptionText, RawCommand
from depexec.domain.failure import CmdFailure
from depexec.domain.outcome import Err, Ok


def _sample_journal() -> Journal:
    journal = Journal()
    journal.record("/repo", Command("gradlew", ["dependencies"]), Ok(b"compile\n"))
    journal.record(
        "/repo",
        Command("npm", ["ls"]),
        Err(CmdFailure(Command("npm", ["ls"]), "/repo", 1, b"", b"npm ERR!")),
    )
    journal.record(Path("sub"), RawCommand("pip", ["install"]), Ok(0))
    journal.record("sub", RawCommand("./missing"), Err(ExceptionText("no such file")))
    return journal


def test_lookup_uses_directory_and_command():
    journal = _sample_journal()
    assert journal.lookup("/repo", Command("gradlew", ["dependencies"])) == Ok(b"compile\n")
    assert journal.lookup("/other", Command("gradlew", ["dependencies"])) is None
    assert journal.lookup("sub", RawCommand("pip", ["install"])) == Ok(0)
    assert journal.lookup("sub", Command("pip", ["install"])) is None


def test_dump_and_load_preserve_entries(tmp_path):
    journal = _sample_journal()
    path = tmp_path / "fixtures" / "journal.json"
    journal.dump(path)
    loaded = Journal.load(path)
    assert loaded.entries() == journal.entries()
    assert len(loaded) == 4


def test_dump_is_stable_regardless_of_insertion_order(tmp_path):
    first = _sample_journal()
    second = Journal()
    for (directory, invocation), outcome in reversed(first.entries()):
        second.record(directory, invocation, outcome)
    first.dump(tmp_path / "a.json")
    second.dump(tmp_path / "b.json")
    assert (tmp_path / "a.json").read_text() == (tmp_path / "b.json").read_text()


def test_repeated_invocation_keeps_one_entry():
    journal = Journal()
    journal.record("/repo", Command("pip"), Ok(b"1"))
    journal.record("/repo", Command("pip"), Ok(b"2"))
    assert len(journal) == 1
    assert journal.lookup("/repo", Command("pip")) == Ok(b"2")


def test_concurrent_records_are_all_kept():
    journal = Journal()

    def record(i: int) -> None:
        journal.record(f"/repo/{i}", Command("pip", ["list"]), Ok(str(i).encode()))

    with ThreadPoolExecutor(max_workers=16) as pool:
        list(pool.map(record, range(200)))
    assert len(journal) == 200
    assert journal.lookup("/repo/117", Command("pip", ["list"])) == Ok(b"117")


def test_frozen_journal_rejects_records():
    frozen = _sample_journal().freeze()
    assert frozen.frozen
    with pytest.raises(RuntimeError):
        frozen.record("/repo", Command("pip"), Ok(b""))


def test_missing_file_is_read_error(tmp_path):
    with pytest.raises(JournalReadError) as exc:
        Journal.load(tmp_path / "nope.json")
    assert exc.value.hint


def test_invalid_json_is_parse_error(tmp_path):
    path = tmp_path / "journal.json"
    path.write_text("{not json")
    with pytest.raises(JournalParseError):
        Journal.load(path)


def test_schema_violation_is_parse_error(tmp_path):
    path = tmp_path / "journal.json"
    path.write_text(
        json.dumps(
            {
                "journal_schema_version": 1,
                "entries": [
                    {
                        "directory": "/repo",
                        "invocation": {"kind": "run", "command": {"name": "pip"}},
                        "outcome": {"status": "ok", "stdout": ""},
                    }
                ],
            }
        )
    )
    with pytest.raises(JournalParseError):
        Journal.load(path)


def test_duplicate_entries_are_rejected():
    entry = _sample_journal().to_json()["entries"][0]
    with pytest.raises(JournalParseError):
        Journal.from_json({"journal_schema_version": 1, "entries": [entry, entry]})
