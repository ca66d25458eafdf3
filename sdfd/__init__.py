"""
sdfd — 2D Signed Distance Field Descriptions
=============================================

Describe, store and evaluate 2-D signed distance fields built from small
analytical primitives combined by a flat DAG of operations.

Implemented features
--------------------
- Primitives: constant scalar, oriented half-plane, circle (an ellipse under
  nonuniform scene scale)
- Operations: ``min`` (union), ``max`` (intersection), ``neg`` (complement)
- Evaluation at single points or over ``(..., 2)`` point arrays
- Binary ``.sdfd`` container: :func:`store_to_file`, :func:`load_from_file`
- Grid sampling: :func:`sample_levelset_2d`, :func:`sample_subpixel_2d`

Quick start
-----------

::

    from sdfd import Scene, Object, Circle, OperationKind, evaluate
    from sdfd import plane_from_point_and_normal

    scene = Scene()
    obj = scene.add_object()
    left  = obj.add_primitive(plane_from_point_and_normal((16, 16), (-1, 0)))
    hole  = obj.add_primitive(Circle(center=(32, 32), radius=12))
    carve = obj.add_operation(OperationKind.NEG, hole)
    obj.add_operation(OperationKind.MAX, left, carve)

    d = evaluate(scene, obj, (32, 32))
"""

from .errors import (
    SDFDError,
    FormatError,
    ShortReadError,
    BadMagicError,
    UnsupportedVersionError,
    InvalidKindError,
    InvalidArgumentError,
)
from .vector import Vector2
from .primitives import (
    Plane,
    Circle,
    Ellipse,
    PrimitiveKind,
    Primitive,
    plane_from_point_and_normal,
    plane_from_points,
    plane_from_point_and_angle,
    plane_from_angle_and_offset,
)
from .operations import (
    OperationKind,
    arity,
    ArgumentKind,
    ArgumentIndex,
    object_primitive_index,
    object_operation_index,
    Operation,
)
from .scene import DEFAULT_SCALE, Object, Scene
from .evaluate import evaluate, evaluate_primitive, evaluate_object
from .serialization import MAGIC, SDFD_VERSION, dumps, loads, store_to_file, load_from_file
from .grid import sample_levelset_2d, sample_subpixel_2d, coverage

__version__ = "0.1.0"

__all__ = [
    # Errors
    "SDFDError",
    "FormatError",
    "ShortReadError",
    "BadMagicError",
    "UnsupportedVersionError",
    "InvalidKindError",
    "InvalidArgumentError",

    # Vector kernel
    "Vector2",

    # Primitives
    "Plane",
    "Circle",
    "Ellipse",
    "PrimitiveKind",
    "Primitive",
    "plane_from_point_and_normal",
    "plane_from_points",
    "plane_from_point_and_angle",
    "plane_from_angle_and_offset",

    # Operations
    "OperationKind",
    "arity",
    "ArgumentKind",
    "ArgumentIndex",
    "object_primitive_index",
    "object_operation_index",
    "Operation",

    # Containers
    "DEFAULT_SCALE",
    "Object",
    "Scene",

    # Evaluation
    "evaluate",
    "evaluate_primitive",
    "evaluate_object",

    # File format
    "MAGIC",
    "SDFD_VERSION",
    "dumps",
    "loads",
    "store_to_file",
    "load_from_file",

    # Grid utilities
    "sample_levelset_2d",
    "sample_subpixel_2d",
    "coverage",
]
