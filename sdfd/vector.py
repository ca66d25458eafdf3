"""Two-component vector algebra for the sdfd package.

This module provides:

* **Value type**: :class:`Vector2`, a pair of binary32 floats
* **Array helpers**: :func:`vec2`, :func:`length`, :func:`dot`,
  :func:`perp`, :func:`sign`, :func:`sign0`

The array helpers accept ``numpy.ndarray`` objects of shape ``(..., 2)``
and broadcast over arbitrary leading batch dimensions, like the helpers
used by the distance functions in :mod:`sdfd.sdf_lib`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Union

import numpy as np
import numpy.typing as npt

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------
_F = npt.NDArray[np.floating]

__all__ = [
    "_F",
    "Vector2", "VectorLike",
    "vec2", "length", "dot", "perp", "sign", "sign0",
]


# ===========================================================================
# Value type
# ===========================================================================

@dataclass(frozen=True)
class Vector2:
    """A pair of single-precision floats ``(x, y)``.

    Components are stored as ``numpy.float32`` so that a vector survives
    the binary32 file format unchanged.  Arithmetic follows IEEE 754 and is
    total; division may produce non-finite values.
    """

    x: np.float32
    y: np.float32

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", np.float32(self.x))
        object.__setattr__(self, "y", np.float32(self.y))

    @classmethod
    def of(cls, value: "VectorLike") -> Vector2:
        """Coerce a ``Vector2`` or any length-2 sequence to a ``Vector2``."""
        if isinstance(value, Vector2):
            return value
        x, y = value
        return cls(x, y)

    def __iter__(self) -> Iterator[np.float32]:
        yield self.x
        yield self.y

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        return np.array([self.x, self.y], dtype=dtype or np.float32)

    # ------------------------------------------------------------------
    # Arithmetic (componentwise; scalars broadcast to both components)
    # ------------------------------------------------------------------

    def _split(self, other) -> tuple:
        if isinstance(other, Vector2):
            return other.x, other.y
        s = np.float32(other)
        return s, s

    def __add__(self, other) -> Vector2:
        ox, oy = self._split(other)
        return Vector2(self.x + ox, self.y + oy)

    def __sub__(self, other) -> Vector2:
        ox, oy = self._split(other)
        return Vector2(self.x - ox, self.y - oy)

    def __mul__(self, other) -> Vector2:
        ox, oy = self._split(other)
        return Vector2(self.x * ox, self.y * oy)

    def __truediv__(self, other) -> Vector2:
        ox, oy = self._split(other)
        with np.errstate(divide="ignore", invalid="ignore"):
            return Vector2(self.x / ox, self.y / oy)

    __radd__ = __add__
    __rmul__ = __mul__

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __abs__(self) -> Vector2:
        return Vector2(abs(self.x), abs(self.y))

    def dot(self, other: Vector2) -> np.float32:
        return self.x * other.x + self.y * other.y

    def length(self) -> np.float32:
        return np.sqrt(self.x * self.x + self.y * self.y)

    def perp(self) -> Vector2:
        """Rotate 90 degrees counter-clockwise."""
        return Vector2(-self.y, self.x)

    def yx(self) -> Vector2:
        """Swap the coordinates."""
        return Vector2(self.y, self.x)


VectorLike = Union[Vector2, Sequence[float], np.ndarray]


# ===========================================================================
# Array helpers
# ===========================================================================

def vec2(x: _F, y: _F) -> _F:
    """Stack *x* and *y* into a ``(..., 2)`` array."""
    x, y = np.broadcast_arrays(x, y)
    return np.stack([x, y], axis=-1)


def length(v: _F) -> _F:
    """Euclidean length along the last axis."""
    return np.sqrt(np.sum(v * v, axis=-1))


def dot(a: _F, b: _F) -> _F:
    """Dot product along the last axis."""
    return np.sum(a * b, axis=-1)


def perp(v: _F) -> _F:
    """Rotate ``(..., 2)`` vectors 90 degrees counter-clockwise."""
    return vec2(-v[..., 1], v[..., 0])


def sign(x: _F) -> _F:
    """``-1`` for negative *x*, otherwise ``+1`` (including zero)."""
    return np.where(x < 0.0, -1.0, 1.0)


def sign0(x: _F) -> _F:
    """Like :func:`sign` but ``0`` at zero."""
    return np.where(x == 0.0, 0.0, sign(x))
