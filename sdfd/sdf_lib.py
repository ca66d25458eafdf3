"""Closed-form 2-D distance functions for the sdfd primitives.

All functions accept a point array *p* of shape ``(..., 2)`` and return
signed distances of shape ``(...,)``, broadcasting over arbitrary leading
batch dimensions.  Shape parameters are plain 2-vectors (anything
``numpy.asarray`` accepts, including :class:`~sdfd.vector.Vector2`).

Arithmetic is done in float64; callers round the result to float32.

The ellipse distance is adapted from Inigo Quilez's analytic solution:
https://iquilezles.org/articles/ellipsedist/
"""

from __future__ import annotations

import numpy as np

from .vector import _F, dot, length, sign, sign0, vec2

__all__ = ["ELLIPSE_EPSILON", "sdPlane", "sdCircle", "sdEllipse"]

# Radii whose squared difference is below this are treated as a circle.
ELLIPSE_EPSILON = 1e-9

_SQRT3 = np.sqrt(3.0)


def _as_vec(v) -> _F:
    return np.asarray(v, dtype=np.float64)


def sdPlane(p: _F, normal, offset: float) -> _F:
    """Half-plane ``dot(normal, p) - offset``; not normalized."""
    return dot(_as_vec(normal), p) - np.float64(offset)


def sdCircle(p: _F, center, radius: float) -> _F:
    """Circle with *center* and *radius*."""
    return length(p - _as_vec(center)) - np.float64(radius)


def sdEllipse(p: _F, center, radius) -> _F:
    """Axis-aligned ellipse with *center* and per-axis *radius* ``(rx, ry)``.

    The query is folded into the first quadrant and, where ``x > y``, the
    axes are swapped so the cubic is always solved in the same octant.
    Nearly circular ellipses (``|ry² - rx²| < ELLIPSE_EPSILON``) fall back
    to :func:`sdCircle`.
    """
    center = _as_vec(center)
    radius = _as_vec(radius)

    q = np.abs(p - center)
    swap = q[..., 0] > q[..., 1]
    px = np.where(swap, q[..., 1], q[..., 0])
    py = np.where(swap, q[..., 0], q[..., 1])
    ax = np.where(swap, radius[1], radius[0])
    ay = np.where(swap, radius[0], radius[1])

    l = ay * ay - ax * ax
    circular = np.abs(l) < ELLIPSE_EPSILON

    # Both branches of every np.where below are evaluated; NaN and inf in
    # the discarded branch are expected.
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        m = ax * px / l
        n = ay * py / l
        m2 = m * m
        n2 = n * n

        c = (m2 + n2 - 1.0) / 3.0
        c3 = c * c * c

        d = c3 + m2 * n2
        qq = d + m2 * n2
        g = m + m * n2

        # d < 0: three real roots
        h = np.arccos(np.clip(qq / c3, -1.0, 1.0)) / 3.0
        s = np.cos(h) + 2.0
        t = np.sin(h) * _SQRT3
        rx = np.sqrt(m2 - c * (s + t))
        ry = np.sqrt(m2 - c * (s - t))
        co_three = ry + sign0(l) * rx + np.abs(g) / (rx * ry)

        # d >= 0: one real root
        h1 = 2.0 * m * n * np.sqrt(d)
        s1 = sign(qq + h1) * np.cbrt(np.abs(qq + h1))
        t1 = sign(qq - h1) * np.cbrt(np.abs(qq - h1))
        rx1 = -(s1 + t1) - c * 4.0 + 2.0 * m2
        ry1 = (s1 - t1) * _SQRT3
        rm = np.sqrt(rx1 * rx1 + ry1 * ry1)
        co_one = ry1 / np.sqrt(rm - rx1) + 2.0 * g / rm

        co = np.where(d < 0.0, co_three, co_one)
        co = (co - m) / 2.0
        si = np.sqrt(np.maximum(1.0 - co * co, 0.0))

        r = vec2(ax * co, ay * si)
        # At the centre of a tall ellipse r lies on the x axis with p.
        side = np.where(py == r[..., 1], px - r[..., 0], py - r[..., 1])
        dist = length(r - vec2(px, py)) * sign(side)

    return np.where(circular, sdCircle(p, center, ay), dist)
