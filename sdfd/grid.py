"""Grid sampling utilities for sdfd scenes."""

from __future__ import annotations

from typing import Tuple, Union

import numpy as np
import numpy.typing as npt

from .evaluate import evaluate
from .primitives import Primitive
from .scene import Object, Scene

_Array = npt.NDArray[np.floating]
_Bounds2D = Tuple[Tuple[float, float], Tuple[float, float]]
_Resolution2D = Tuple[int, int]
_Target = Union[Object, Primitive]

SUBPIXELS = 3


def _points(xs: _Array, ys: _Array) -> _Array:
    """``(len(ys), len(xs), 2)`` array of ``(x, y)`` sample positions."""
    Y, X = np.meshgrid(ys, xs, indexing="ij")
    return np.stack([X, Y], axis=-1)


def _cell_centres(lo: float, hi: float, n: int) -> _Array:
    step = (hi - lo) / n
    return lo + step * (np.arange(n, dtype=np.float64) + 0.5)


def sample_levelset_2d(
    scene: Scene,
    target: _Target,
    bounds: _Bounds2D,
    resolution: _Resolution2D,
) -> _Array:
    """Evaluate *target* at the centres of a uniform grid of cells.

    Parameters
    ----------
    scene:
        Scene whose ``scale`` applies to the primitives.
    target:
        An :class:`~sdfd.scene.Object` or a single primitive.
    bounds:
        ``((x0, x1), (y0, y1))`` extents of the sampled region.
    resolution:
        ``(nx, ny)`` number of cells along each axis.

    Returns
    -------
    numpy.ndarray
        Shape ``(ny, nx)`` float32 array, row ``j`` holding the cells of
        the ``j``-th row from ``y0``.
    """
    (x0, x1), (y0, y1) = bounds
    nx, ny = resolution
    p = _points(_cell_centres(x0, x1, nx), _cell_centres(y0, y1, ny))
    return evaluate(scene, target, p)


def sample_subpixel_2d(
    scene: Scene,
    target: _Target,
    size: _Resolution2D,
) -> _Array:
    """Sample three horizontal subpixels per pixel for LCD stripe output.

    Pixel ``(x, y)`` channel ``ch`` is sampled at ``(3x + ch + 0.5, y + 0.5)``.
    The caller is expected to set ``scene.scale`` to ``(3, 1)`` so the
    shapes are stretched to the tripled horizontal resolution.

    Returns
    -------
    numpy.ndarray
        Shape ``(height, width, 3)`` float32 array of signed distances.
    """
    width, height = size
    p = _points(_cell_centres(0, width * SUBPIXELS, width * SUBPIXELS),
                _cell_centres(0, height, height))
    return evaluate(scene, target, p).reshape(height, width, SUBPIXELS)


def coverage(phi: _Array) -> _Array:
    """Map signed distances to anti-aliased alpha in ``[0, 1]``.

    The surface is given a one-unit wide ramp: ``clamp(0.5 - phi, 0, 1)``.
    """
    return np.clip(0.5 - np.asarray(phi), 0.0, 1.0)
