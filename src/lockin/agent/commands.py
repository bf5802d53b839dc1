"""Closed set of commands and host events accepted by the background agent."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Union

from lockin.exceptions import InvalidInputError


@dataclass(frozen=True)
class FocusChanged:
    url: str | None


@dataclass(frozen=True)
class FocusLost:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class AlarmFired:
    name: str


@dataclass(frozen=True)
class AddBlockedSite:
    site: str


@dataclass(frozen=True)
class RemoveBlockedSite:
    site: str


@dataclass(frozen=True)
class SetTimerMode:
    mode: str
    duration_seconds: int | None = None


@dataclass(frozen=True)
class StartTimer:
    pass


@dataclass(frozen=True)
class PauseTimer:
    # Display-side countdown value; derived from the running end time when omitted.
    remaining_seconds: int | None = None


@dataclass(frozen=True)
class ResetTimer:
    pass


@dataclass(frozen=True)
class StartBrainBreak:
    minutes: float


@dataclass(frozen=True)
class EndBrainBreak:
    pass


@dataclass(frozen=True)
class SetNotifications:
    enabled: bool


@dataclass(frozen=True)
class GetStats:
    days: int = 7
    limit: int = 10


@dataclass(frozen=True)
class ExportData:
    pass


@dataclass(frozen=True)
class ImportData:
    payload: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ClearData:
    pass


@dataclass(frozen=True)
class GetStatus:
    pass


Command = Union[
    FocusChanged,
    FocusLost,
    Tick,
    AlarmFired,
    AddBlockedSite,
    RemoveBlockedSite,
    SetTimerMode,
    StartTimer,
    PauseTimer,
    ResetTimer,
    StartBrainBreak,
    EndBrainBreak,
    SetNotifications,
    GetStats,
    ExportData,
    ImportData,
    ClearData,
    GetStatus,
]

COMMAND_TYPES: dict[str, type] = {cls.__name__: cls for cls in Command.__args__}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


# Annotation (as written on the dataclasses above) -> accepts(value).
_FIELD_CHECKS = {
    "str": lambda v: isinstance(v, str),
    "str | None": lambda v: v is None or isinstance(v, str),
    "int": _is_int,
    "int | None": lambda v: v is None or _is_int(v),
    "float": _is_number,
    "bool": lambda v: isinstance(v, bool),
    "dict": lambda v: isinstance(v, dict),
}


def _check_field(type_name: str, name: str, annotation: str, value):
    check = _FIELD_CHECKS[annotation]
    if not check(value):
        raise InvalidInputError(
            f"Bad argument for {type_name}: {name} must be {annotation}, got {value!r}"
        )
    return value


# JSON field names for the inbound channel.
_WIRE_NAMES = {
    "duration_seconds": "durationSeconds",
    "remaining_seconds": "remainingSeconds",
}


def parse_command(raw: dict) -> Command:
    """Build a command from ``{"type": "AddBlockedSite", "site": "..."}``."""
    if not isinstance(raw, dict):
        raise InvalidInputError(f"Command must be an object, got {type(raw).__name__}")
    type_name = raw.get("type")
    cls = COMMAND_TYPES.get(type_name) if isinstance(type_name, str) else None
    if cls is None:
        raise InvalidInputError(f"Unknown command type: {type_name!r}")

    kwargs = {}
    for f in fields(cls):
        wire = _WIRE_NAMES.get(f.name, f.name)
        if wire in raw:
            value = raw[wire]
        elif f.name in raw:
            value = raw[f.name]
        else:
            continue
        kwargs[f.name] = _check_field(type_name, f.name, f.type, value)
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise InvalidInputError(f"Bad arguments for {type_name}: {e}") from e
