"""Message kinds, statuses and helpers for the key/value wire messages."""

from __future__ import annotations

import math
import re
from decimal import Decimal
from enum import Enum
from typing import Mapping, Union

from .vector import Vec3, _shortest_f32, _to_f32


class TypeMessage(str, Enum):
    """Kind of a message, carried in its ``type`` field."""

    MOVEMENT = "movement"
    CONNECTION = "connection"
    DISCONNECTION = "disconnection"
    UNKNOWN = "unknown"
    JOIN = "join"
    PARTICIPANTS = "participants"

    def __str__(self) -> str:
        return self.value


class TypeStatus(str, Enum):
    """Status of a reply, carried in its ``status`` field."""

    SUCCES = "succes"
    ERROR = "error"
    UNKNOWN = "unknow"

    def __str__(self) -> str:
        return self.value


_MESSAGE_TYPES = {
    t.value: t
    for t in (
        TypeMessage.MOVEMENT,
        TypeMessage.JOIN,
        TypeMessage.CONNECTION,
        TypeMessage.DISCONNECTION,
        TypeMessage.PARTICIPANTS,
    )
}
_STATUS_TYPES = {t.value: t for t in (TypeStatus.SUCCES, TypeStatus.ERROR)}


def message_type(value: str) -> TypeMessage:
    """Map a ``type`` field to its kind; anything unrecognised is UNKNOWN."""
    return _MESSAGE_TYPES.get(value, TypeMessage.UNKNOWN)


def status_type(value: str) -> TypeStatus:
    """Map a ``status`` field to its status; anything unrecognised is UNKNOWN."""
    return _STATUS_TYPES.get(value, TypeStatus.UNKNOWN)


def format_float(value: float) -> str:
    """Render a single-precision number in plain decimal, without exponent."""
    v = _to_f32(value)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "inf" if v > 0 else "-inf"
    if v == 0:
        return "-0" if math.copysign(1.0, v) < 0 else "0"
    text = format(Decimal(_shortest_f32(v)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def create_move_resp(
    username: str, x: float, y: float, z: float, type_msg: Union[str, TypeMessage]
) -> dict[str, str]:
    """Build a position message for ``username``."""
    kind = type_msg.value if isinstance(type_msg, TypeMessage) else type_msg
    return {
        "type": kind,
        "username": username,
        "x": format_float(x),
        "y": format_float(y),
        "z": format_float(z),
    }


def get_field(data: Mapping[str, str], field_name: str) -> str:
    """Value of a field, or the empty string when it is absent."""
    return data.get(field_name, "")


_F32_SYNTAX = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)", re.IGNORECASE
)


def _parse_f32(text: str | None) -> float | None:
    if text is None or not _F32_SYNTAX.fullmatch(text):
        return None
    return _to_f32(float(text))


def get_pos_player(data: Mapping[str, str]) -> Vec3:
    """Read ``x``, ``y`` and ``z``; a missing or malformed coordinate reads as 0."""
    coords = []
    for key in ("x", "y", "z"):
        parsed = _parse_f32(data.get(key))
        coords.append(0.0 if parsed is None else parsed)
    return Vec3(*coords)