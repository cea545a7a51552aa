"""Base model and enum for cartfleet records.

Every record model inherits from :class:`FleetBaseModel` which provides:

* ``alias_generator=to_camel`` so stored camelCase keys map
  automatically to snake_case fields.
* ``frozen=True``: records are replaced, never mutated in place.
* ``extra="ignore"`` so snapshots written by newer clients still load.

Enumerations inherit from :class:`FleetEnum`, a ``StrEnum`` whose
``_missing_`` hook matches values case-insensitively.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from cartfleet._dates import parse_local_datetime

_logger = logging.getLogger(__name__)

LocalDateTime = Annotated[datetime, AfterValidator(parse_local_datetime)]
"""Annotated datetime that normalizes aware values to naive local time."""

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class FleetEnum(enum.StrEnum):
    """Base for cartfleet string enums."""

    @classmethod
    def _missing_(cls, value: object) -> FleetEnum | None:
        if isinstance(value, str):
            folded = value.strip().casefold()
            for member in cls:
                if member.value.casefold() == folded:
                    return member
        return None


class FleetBaseModel(BaseModel):
    """Base for customer, cart and event records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str

    def to_storage(self) -> dict[str, Any]:
        """Dump to the camelCase JSON-compatible form used in snapshots."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


TModel = TypeVar("TModel", bound=FleetBaseModel)


def _field_names(model_cls: type[FleetBaseModel]) -> dict[str, str]:
    """Map every accepted key (field name and alias) to the field name."""
    names: dict[str, str] = {}
    for name, info in model_cls.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names


def apply_changes(record: TModel, changes: Mapping[str, Any]) -> TModel:
    """Return a re-validated copy of *record* with *changes* merged in.

    *changes* may use snake_case field names or camelCase aliases.  The
    ``id`` is immutable and unknown keys are dropped.

    Raises :class:`pydantic.ValidationError` if the merged record is invalid.
    """
    model_cls = type(record)
    accepted = _field_names(model_cls)
    merged = record.model_dump()
    for key, value in changes.items():
        field_name = accepted.get(key)
        if field_name is None:
            _logger.debug("Ignoring unknown %s field %r", model_cls.__name__, key)
            continue
        if field_name == "id":
            if value != record.id:
                _logger.debug("Ignoring attempt to change %s id %s", model_cls.__name__, record.id)
            continue
        merged[field_name] = value
    return model_cls.model_validate(merged)


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id(
    prefix: str,
    existing: Iterable[str],
    *,
    now_ms: Callable[[], int] | None = None,
) -> str:
    """Build ``<prefix>-<base36 epoch ms>``, suffixed until it is unique."""
    ms = now_ms() if now_ms is not None else int(time.time() * 1000)
    candidate = f"{prefix}-{_base36(ms)}"
    taken = set(existing)
    if candidate not in taken:
        return candidate
    n = 2
    while f"{candidate}-{n}" in taken:
        n += 1
    return f"{candidate}-{n}"
