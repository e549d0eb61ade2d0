"""Record/replay journal for command invocations.

A journal maps an invocation key, the lexically normalised directory the
caller passed plus the command, to the outcome that invocation produced.
Recording sessions append to it from many threads; replay sessions load it
once and only read it afterwards.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import threading
from types import MappingProxyType
from typing import Mapping, TypeAlias

import jsonschema

from depexec.adapters.errors import JournalParseError, JournalReadError, JournalWriteError
from depexec.domain.codec import (
    CodecError,
    decode_command,
    decode_raw_command,
    decode_raw_outcome,
    decode_run_outcome,
    encode_command,
    encode_raw_command,
    encode_raw_outcome,
    encode_run_outcome,
)
from depexec.domain.command import Command, ExceptionText, RawCommand
from depexec.domain.failure import CmdFailure
from depexec.domain.json_types import JsonDict, as_json_dict, as_json_list, canonical_dumps
from depexec.domain.outcome import Outcome
from depexec.ports.exec import Directory

logger = logging.getLogger(__name__)

JOURNAL_SCHEMA_VERSION = 1
SCHEMA_PATH = (
    Path(__file__).resolve().parents[2] / "schemas" / "exec-journal.schema.v1.json"
)

Invocation: TypeAlias = Command | RawCommand
JournalKey: TypeAlias = tuple[str, Invocation]
RecordedOutcome: TypeAlias = Outcome[bytes, CmdFailure] | Outcome[int, ExceptionText]


def journal_key(directory: Directory, invocation: Invocation) -> JournalKey:
    # lexical only; relative keys stay relative
    return (os.path.normpath(os.fspath(directory)), invocation)


def encode_invocation(invocation: Invocation) -> JsonDict:
    if isinstance(invocation, Command):
        return {"kind": "run", "command": encode_command(invocation)}
    return {"kind": "run_raw", "raw_command": encode_raw_command(invocation)}


def encode_entry(key: JournalKey, outcome: RecordedOutcome) -> JsonDict:
    directory, invocation = key
    if isinstance(invocation, Command):
        encoded_outcome = encode_run_outcome(outcome)  # type: ignore[arg-type]
    else:
        encoded_outcome = encode_raw_outcome(outcome)  # type: ignore[arg-type]
    return {
        "directory": directory,
        "invocation": encode_invocation(invocation),
        "outcome": encoded_outcome,
    }


def decode_entry(raw: object) -> tuple[JournalKey, RecordedOutcome]:
    data = as_json_dict(raw)
    directory = data.get("directory")
    if not isinstance(directory, str):
        raise CodecError("entry: field 'directory' must be a string")
    invocation = as_json_dict(data.get("invocation"))
    if invocation.get("kind") == "run":
        command = decode_command(invocation.get("command"))
        return journal_key(directory, command), decode_run_outcome(data.get("outcome"))
    if invocation.get("kind") == "run_raw":
        raw_command = decode_raw_command(invocation.get("raw_command"))
        return journal_key(directory, raw_command), decode_raw_outcome(data.get("outcome"))
    raise CodecError(f"entry: unknown invocation kind {invocation.get('kind')!r}")


def _sort_key(key: JournalKey) -> str:
    directory, invocation = key
    return canonical_dumps([directory, encode_invocation(invocation)])


class Journal:
    def __init__(self, entries: Mapping[JournalKey, RecordedOutcome] | None = None) -> None:
        self._entries: dict[JournalKey, RecordedOutcome] = dict(entries or {})
        self._lock = threading.Lock()
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def record(
        self, directory: Directory, invocation: Invocation, outcome: RecordedOutcome
    ) -> None:
        if self._frozen:
            raise RuntimeError("cannot record into a frozen journal")
        key = journal_key(directory, invocation)
        with self._lock:
            self._entries[key] = outcome
        logger.debug("recorded %s in %s", invocation.name, key[0])

    def lookup(
        self, directory: Directory, invocation: Invocation
    ) -> RecordedOutcome | None:
        return self._entries.get(journal_key(directory, invocation))

    def freeze(self) -> "Journal":
        """Return a read-only copy, safe to share between replaying threads."""
        with self._lock:
            snapshot = dict(self._entries)
        frozen = Journal()
        frozen._entries = MappingProxyType(snapshot)  # type: ignore[assignment]
        frozen._frozen = True
        return frozen

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def entries(self) -> list[tuple[JournalKey, RecordedOutcome]]:
        with self._lock:
            items = list(self._entries.items())
        return sorted(items, key=lambda item: _sort_key(item[0]))

    def to_json(self) -> JsonDict:
        return {
            "journal_schema_version": JOURNAL_SCHEMA_VERSION,
            "entries": [encode_entry(key, outcome) for key, outcome in self.entries()],
        }

    @classmethod
    def from_json(cls, data: object) -> "Journal":
        schema = as_json_dict(json.loads(SCHEMA_PATH.read_text(encoding="utf-8")))
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise JournalParseError(
                f"Journal does not match schema: {e.message}",
                details=as_json_dict({"path": list(e.absolute_path)}),
                cause=e,
            )
        entries: dict[JournalKey, RecordedOutcome] = {}
        for raw_entry in as_json_list(as_json_dict(data).get("entries")):
            try:
                key, outcome = decode_entry(raw_entry)
            except CodecError as e:
                raise JournalParseError(f"Invalid journal entry: {e}", cause=e)
            if key in entries:
                raise JournalParseError(
                    f"Duplicate journal entry for {key[1].name} in {key[0]}",
                    details=encode_entry(key, outcome),
                )
            entries[key] = outcome
        return cls(entries)

    def dump(self, path: Path) -> None:
        content = json.dumps(self.to_json(), indent=2, sort_keys=True) + "\n"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise JournalWriteError(
                f"Could not write journal: {path}",
                details=as_json_dict({"path": str(path)}),
                cause=e,
            )
        logger.info("wrote %d journal entries to %s", len(self), path)

    @classmethod
    def load(cls, path: Path) -> "Journal":
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise JournalReadError(
                f"Could not read journal: {path}",
                details=as_json_dict({"path": str(path)}),
                hint="Record the journal first with DEPEXEC_MODE=record",
                cause=e,
            )
        try:
            data: object = json.loads(text)
        except json.JSONDecodeError as e:
            raise JournalParseError(
                f"Journal is not valid JSON: {path}",
                details=as_json_dict({"path": str(path), "line": e.lineno}),
                cause=e,
            )
        journal = cls.from_json(data)
        logger.debug("loaded %d journal entries from %s", len(journal), path)
        return journal
