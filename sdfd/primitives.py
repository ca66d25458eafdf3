"""Analytical 2-D primitives: planes, circles and ellipses.

A :class:`Primitive` is a closed sum over three variants, each carrying a
stable on-disk tag:

=========  ===  ====================================
variant    tag  payload
=========  ===  ====================================
scalar     0    one float, a constant field
plane      4    :class:`Plane` (normal, offset)
circle     5    :class:`Circle` (center, radius)
=========  ===  ====================================

Tags 1-3 are reserved.  :class:`Ellipse` has no tag; it is what a circle
becomes under a nonuniform scene scale and is only used during evaluation.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Union

import numpy as np

from .errors import InvalidKindError
from .vector import Vector2, VectorLike

__all__ = [
    "Plane", "Circle", "Ellipse",
    "PrimitiveKind", "Primitive", "PrimitiveValue",
    "plane_from_point_and_normal",
    "plane_from_points",
    "plane_from_point_and_angle",
    "plane_from_angle_and_offset",
]


# ===========================================================================
# Shapes
# ===========================================================================

@dataclass(frozen=True)
class Plane:
    """Oriented half-plane ``dot(normal, p) - offset``.

    Moving along *normal* increases the distance; the side the normal
    points to is empty, the opposite side is solid.  The normal is unit
    length by convention only.  Distances scale with ``|normal|``.
    """

    normal: Vector2
    offset: np.float32

    def __post_init__(self) -> None:
        object.__setattr__(self, "normal", Vector2.of(self.normal))
        object.__setattr__(self, "offset", np.float32(self.offset))


@dataclass(frozen=True)
class Circle:
    """Circle with *center* and *radius* (``radius >= 0``)."""

    center: Vector2
    radius: np.float32

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", Vector2.of(self.center))
        object.__setattr__(self, "radius", np.float32(self.radius))


@dataclass(frozen=True)
class Ellipse:
    """Axis-aligned ellipse with *center* and per-axis *radius*."""

    center: Vector2
    radius: Vector2

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", Vector2.of(self.center))
        object.__setattr__(self, "radius", Vector2.of(self.radius))


# ===========================================================================
# Tagged variant
# ===========================================================================

class PrimitiveKind(enum.IntEnum):
    SCALAR = 0
    PLANE = 4
    CIRCLE = 5

    @classmethod
    def parse(cls, tag: int) -> PrimitiveKind:
        """Return the kind for *tag*, raising :class:`InvalidKindError` if unknown."""
        try:
            return cls(tag)
        except ValueError:
            raise InvalidKindError(f"invalid primitive kind {tag}") from None


PrimitiveValue = Union[np.float32, Plane, Circle]

_PAYLOAD_TYPES = {
    PrimitiveKind.SCALAR: np.float32,
    PrimitiveKind.PLANE: Plane,
    PrimitiveKind.CIRCLE: Circle,
}


@dataclass(frozen=True)
class Primitive:
    """One primitive: a *kind* tag and the matching *value*.

    Use :meth:`of` to build one from a bare float, :class:`Plane` or
    :class:`Circle`.
    """

    kind: PrimitiveKind
    value: PrimitiveValue

    def __post_init__(self) -> None:
        kind = PrimitiveKind.parse(self.kind)
        value = self.value
        if kind is PrimitiveKind.SCALAR and isinstance(value, (int, float, np.floating)):
            value = np.float32(value)
        if not isinstance(value, _PAYLOAD_TYPES[kind]):
            raise TypeError(
                f"{kind.name.lower()} primitive cannot hold {type(value).__name__}"
            )
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", value)

    @classmethod
    def of(cls, value: Union[Primitive, PrimitiveValue, float]) -> Primitive:
        if isinstance(value, Primitive):
            return value
        if isinstance(value, Plane):
            return cls(PrimitiveKind.PLANE, value)
        if isinstance(value, Circle):
            return cls(PrimitiveKind.CIRCLE, value)
        if isinstance(value, (int, float, np.floating)):
            return cls(PrimitiveKind.SCALAR, value)
        raise TypeError(f"cannot make a primitive from {type(value).__name__}")

    @classmethod
    def scalar(cls, value: float) -> Primitive:
        return cls(PrimitiveKind.SCALAR, value)

    @classmethod
    def plane(cls, plane: Plane) -> Primitive:
        return cls(PrimitiveKind.PLANE, plane)

    @classmethod
    def circle(cls, circle: Circle) -> Primitive:
        return cls(PrimitiveKind.CIRCLE, circle)


# ===========================================================================
# Plane constructors
# ===========================================================================

def plane_from_point_and_normal(point: VectorLike, normal: VectorLike) -> Plane:
    """Plane through *point*; moving along *normal* leaves the solid."""
    point = Vector2.of(point)
    normal = Vector2.of(normal)
    return Plane(normal=normal, offset=point.dot(normal))


def plane_from_points(a: VectorLike, b: VectorLike) -> Plane:
    """Plane through *a* and *b*.

    Facing from *a* toward *b* in y-down raster coordinates, the solid side
    is on the right.  The normal is ``(d.y, -d.x)`` for ``d = b - a`` and
    is **not** normalized.
    """
    a = Vector2.of(a)
    d = Vector2.of(b) - a
    return plane_from_point_and_normal(a, Vector2(d.y, -d.x))


def _unit_from_angle(angle: float) -> Vector2:
    return Vector2(math.cos(angle), math.sin(angle))


def plane_from_point_and_angle(point: VectorLike, angle: float) -> Plane:
    """Plane through *point* with normal ``(cos angle, sin angle)``."""
    return plane_from_point_and_normal(point, _unit_from_angle(angle))


def plane_from_angle_and_offset(angle: float, offset: float) -> Plane:
    """Plane with normal ``(cos angle, sin angle)`` moved *offset* along it."""
    return Plane(normal=_unit_from_angle(angle), offset=offset)
