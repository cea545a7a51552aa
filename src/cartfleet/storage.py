"""Key-value persistence for collection snapshots.

The state store only needs ``get``/``set`` by string key.  Each collection is
written as a JSON array of camelCase records; dates become ISO-8601 strings
and are parsed back into datetimes on load.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, Protocol, TypeVar

from pydantic import TypeAdapter, ValidationError

from cartfleet.exceptions import SnapshotDecodeError, StorageError
from cartfleet.models._base import FleetBaseModel

_logger = logging.getLogger(__name__)

TRecord = TypeVar("TRecord", bound=FleetBaseModel)


class KeyValueStore(Protocol):
    """Minimal string key-value store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store, mainly for tests and ephemeral sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """Store backed by one JSON object on disk (``{key: value}``).

    Every ``set`` rewrites the file through a temporary file and
    :func:`os.replace`, so readers never observe a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        if not self._path.exists():
            self._data = {}
            return self._data
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Cannot read store file {self._path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise StorageError(f"Store file {self._path} does not contain a JSON object")
        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
        except OSError as exc:
            raise StorageError(f"Cannot write key {key!r} to {self._path}: {exc}", key=key) from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except (OSError, TypeError, ValueError) as exc:
            # Remove the partial temp file
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot write key {key!r} to {self._path}: {exc}", key=key) from exc
        self._data = data


@dataclass(frozen=True)
class LoadResult(Generic[TRecord]):
    """Outcome of loading one collection snapshot.

    ``ok`` is false when the stored value exists but could not be parsed;
    ``records`` is then empty and ``reason`` says why.
    """

    key: str
    records: list[TRecord] = field(default_factory=list)
    found: bool = False
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    def unwrap(self) -> list[TRecord]:
        """Return the records or raise :class:`SnapshotDecodeError`."""
        if self.reason is not None:
            raise SnapshotDecodeError(self.reason, key=self.key)
        return self.records


def encode_collection(records: Sequence[FleetBaseModel]) -> str:
    return json.dumps([record.to_storage() for record in records], ensure_ascii=False)


def decode_collection(key: str, payload: str | None, model: type[TRecord]) -> LoadResult[TRecord]:
    """Parse a stored snapshot into records without raising."""
    if payload is None:
        return LoadResult(key=key)
    try:
        data = json.loads(payload)
    except ValueError as exc:
        return LoadResult(key=key, found=True, reason=f"invalid JSON: {exc}")
    if not isinstance(data, list):
        return LoadResult(key=key, found=True, reason=f"expected a JSON array, got {type(data).__name__}")
    try:
        records = TypeAdapter(list[model]).validate_python(data)  # type: ignore[valid-type]
    except ValidationError as exc:
        return LoadResult(
            key=key,
            found=True,
            reason=f"{exc.error_count()} invalid field(s): {exc.errors()[0]['msg']}",
        )
    return LoadResult(key=key, records=records, found=True)


def read_snapshot(store: KeyValueStore, key: str, model: type[TRecord]) -> LoadResult[TRecord]:
    """Read and decode *key*; storage failures are reported like parse failures."""
    try:
        payload = store.get(key)
    except StorageError as exc:
        result: LoadResult[TRecord] = LoadResult(key=key, found=True, reason=str(exc))
    else:
        result = decode_collection(key, payload, model)
    if not result.ok:
        _logger.warning("Ignoring stored %s: %s", key, result.reason)
    return result
