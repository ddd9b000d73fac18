"""Three-component single-precision vector used for positions."""

from __future__ import annotations

import json
import math
import struct
from dataclasses import dataclass
from typing import ClassVar


def _to_f32(value: float) -> float:
    """Round a float to the nearest single-precision value."""
    value = float(value)
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _shortest_f32(value: float) -> str:
    """Shortest decimal text that reads back as the same single-precision value."""
    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        if _to_f32(float(text)) == value:
            return text
    return f"{value:.9g}"


def _json_number(value: float) -> str:
    if not math.isfinite(value):
        return "null"
    text = repr(float(_shortest_f32(value)))
    if "e" in text:
        mantissa, exponent = text.split("e")
        text = f"{mantissa}e{int(exponent)}"
    return text


@dataclass(frozen=True)
class Vec3:
    """An immutable 3D vector whose components are kept at single precision."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    ZERO: ClassVar["Vec3"]

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", _to_f32(self.x))
        object.__setattr__(self, "y", _to_f32(self.y))
        object.__setattr__(self, "z", _to_f32(self.z))

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> "Vec3":
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __neg__(self) -> "Vec3":
        return Vec3(-self.x, -self.y, -self.z)

    def length(self) -> float:
        """Euclidean norm."""
        return _to_f32(math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z))

    def distance(self, other: "Vec3") -> float:
        """Euclidean distance to another vector."""
        return (self - other).length()

    def lerp(self, other: "Vec3", t: float) -> "Vec3":
        """Linear interpolation: self at t=0, other at t=1."""
        return self + (other - self) * t

    def to_json(self) -> str:
        """Serialise as a JSON array ``[x,y,z]``; non-finite values become null."""
        return "[" + ",".join(_json_number(c) for c in self) + "]"


Vec3.ZERO = Vec3()


def _reject_constant(name: str):
    raise ValueError(f"non-finite number {name!r} is not valid JSON")


def parse_vec3(text: str) -> Vec3:
    """Parse a JSON array of three numbers into a Vec3; raise ValueError otherwise."""
    data = json.loads(text, parse_constant=_reject_constant)
    if not isinstance(data, list) or len(data) != 3:
        raise ValueError(f"expected an array of 3 numbers, got {text!r}")
    if any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in data):
        raise ValueError(f"expected numeric components, got {text!r}")
    return Vec3(*data)