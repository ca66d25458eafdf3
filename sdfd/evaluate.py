"""Distance evaluation for primitives and operation DAGs.

Every function here is pure: it reads the scene and the query points and
returns new arrays, so one scene may be evaluated from many threads as long
as nobody mutates it meanwhile.

Points may be a single :class:`~sdfd.vector.Vector2` (or length-2
sequence), which yields a ``numpy.float32`` scalar, or an array of shape
``(..., 2)``, which yields a ``float32`` array of shape ``(...)``.
"""

from __future__ import annotations

from typing import Dict, List, Union

import numpy as np

from . import sdf_lib as sdf
from .operations import ArgumentIndex, ArgumentKind, OperationKind
from .primitives import Ellipse, Plane, Primitive, PrimitiveKind, PrimitiveValue
from .scene import Object, Scene
from .vector import _F, Vector2

__all__ = ["evaluate", "evaluate_primitive", "evaluate_object"]


def _as_points(point) -> _F:
    p = np.asarray(point, dtype=np.float64)
    if p.shape[-1:] != (2,):
        raise ValueError(f"points must have shape (..., 2), got {p.shape}")
    return p


def _finish(d: _F):
    d = np.asarray(d, dtype=np.float32)
    return d[()] if d.ndim == 0 else d


def _scaled_plane(plane: Plane, scale: Vector2):
    """Return ``(normal, offset)`` of *plane* in scaled coordinates.

    A point ``p`` on the plane maps to ``s * p``, so the scaled plane is
    ``sy*nx*x + sx*ny*y = sx*sy*offset``.  This is the line through two
    scaled points of the plane and holds for normals of any length.  Under
    nonuniform scale the distances are not Euclidean, only monotonic in the
    true distance.
    """
    nx, ny = np.float64(plane.normal.x), np.float64(plane.normal.y)
    sx, sy = np.float64(scale.x), np.float64(scale.y)
    normal = np.array([sy * nx, sx * ny])
    return normal, sx * sy * np.float64(plane.offset)


def _primitive_distance(scene: Scene, primitive: Primitive, p: _F) -> _F:
    value = primitive.value
    kind = primitive.kind
    if kind is PrimitiveKind.SCALAR:
        return np.full(p.shape[:-1], value, dtype=np.float64)
    scale = Vector2.of(scene.scale)
    if kind is PrimitiveKind.PLANE:
        normal, offset = _scaled_plane(value, scale)
        return sdf.sdPlane(p, normal, offset)
    if kind is PrimitiveKind.CIRCLE:
        ellipse = Ellipse(center=scale * value.center, radius=scale * value.radius)
        return sdf.sdEllipse(p, ellipse.center, ellipse.radius)
    raise ValueError(f"unhandled primitive kind {kind!r}")


def evaluate_primitive(
    scene: Scene, primitive: Union[Primitive, PrimitiveValue, float], point
):
    """Distance from *point* to a single primitive under ``scene.scale``."""
    p = _as_points(point)
    return _finish(_primitive_distance(scene, Primitive.of(primitive), p))


def _object_distance(scene: Scene, obj: Object, p: _F) -> _F:
    if not obj.operations:
        if not obj.primitives:
            return np.full(p.shape[:-1], np.inf)
        return _primitive_distance(scene, obj.primitives[-1], p)

    nan = np.full(p.shape[:-1], np.nan)
    results: List[_F] = [nan] * len(obj.operations)
    primitive_cache: Dict[int, _F] = {}

    def argument(arg: ArgumentIndex) -> _F:
        i = arg.index
        if arg.kind == ArgumentKind.OBJECT_PRIMITIVE:
            if i >= len(obj.primitives):
                return nan
            if i not in primitive_cache:
                primitive_cache[i] = _primitive_distance(scene, obj.primitives[i], p)
            return primitive_cache[i]
        # Operations not yet computed still hold NaN.
        if i >= len(results):
            return nan
        return results[i]

    for position, operation in enumerate(obj.operations):
        args = operation.args
        if operation.kind is OperationKind.MIN:
            results[position] = np.minimum(argument(args[0]), argument(args[1]))
        elif operation.kind is OperationKind.MAX:
            results[position] = np.maximum(argument(args[0]), argument(args[1]))
        elif operation.kind is OperationKind.NEG:
            results[position] = -argument(args[0])
        else:
            raise ValueError(f"unhandled operation kind {operation.kind!r}")
    return results[-1]


def evaluate_object(scene: Scene, obj: Object, point):
    """Distance from *point* to the compound field of *obj*.

    The DAG is swept once in order.  An argument naming a missing primitive
    or an operation at or after the current one reads NaN, and the NaN
    propagates through every consumer.
    """
    p = _as_points(point)
    return _finish(_object_distance(scene, obj, p))


def evaluate(scene: Scene, target: Union[Object, Primitive, PrimitiveValue, float], point):
    """Evaluate *target* (an :class:`Object` or a primitive) at *point*."""
    if isinstance(target, Object):
        return evaluate_object(scene, target, point)
    return evaluate_primitive(scene, target, point)
