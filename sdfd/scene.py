"""Objects and scenes: the containers that own primitives and operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from .errors import InvalidArgumentError
from .operations import (
    ArgumentIndex,
    ArgumentKind,
    Operation,
    OperationKind,
    object_operation_index,
    object_primitive_index,
)
from .primitives import Primitive, PrimitiveValue
from .vector import Vector2

__all__ = ["DEFAULT_SCALE", "Object", "Scene"]

DEFAULT_SCALE = Vector2(1.0, 1.0)


@dataclass
class Object:
    """An ordered primitive list plus a forward-only operation list.

    The object's field is the value of its last operation.  With no
    operations it is the last primitive's field, and with neither it is
    ``+inf`` everywhere.

    Appending fixes indices, so build bottom-up::

        obj = Object()
        a = obj.add_primitive(Circle((0, 0), 1))
        b = obj.add_primitive(Circle((1, 0), 1))
        obj.add_operation(OperationKind.MIN, a, b)
    """

    primitives: List[Primitive] = field(default_factory=list)
    operations: List[Operation] = field(default_factory=list)

    def add_primitive(self, value: Union[Primitive, PrimitiveValue, float]) -> ArgumentIndex:
        """Append a primitive and return the index that refers to it."""
        self.primitives.append(Primitive.of(value))
        return object_primitive_index(len(self.primitives) - 1)

    def add_operation(
        self, kind: Union[Operation, OperationKind], *args: ArgumentIndex
    ) -> ArgumentIndex:
        """Append an operation and return the index that refers to its result.

        *kind* may also be a ready-made :class:`Operation`, in which case no
        further arguments are accepted.
        """
        if isinstance(kind, Operation):
            if args:
                raise TypeError("extra arguments given with a built Operation")
            operation = kind
        else:
            operation = Operation(kind, args)
        self.operations.append(operation)
        return object_operation_index(len(self.operations) - 1)

    def validate(self) -> None:
        """Raise :class:`InvalidArgumentError` if any argument is dangling.

        Evaluation never raises on a malformed DAG (bad slots become NaN);
        call this after loading when strict checking is wanted.
        """
        for position, operation in enumerate(self.operations):
            for arg in operation.args:
                if arg.kind == ArgumentKind.OBJECT_PRIMITIVE:
                    if arg.index >= len(self.primitives):
                        raise InvalidArgumentError(
                            f"operation {position} references primitive {arg.index}, "
                            f"object has {len(self.primitives)}"
                        )
                elif arg.index >= position:
                    raise InvalidArgumentError(
                        f"operation {position} references operation {arg.index}, "
                        "which is not a prior operation"
                    )


@dataclass
class Scene:
    """Objects, shared primitives, and the scale applied before evaluation.

    The shared primitive list is stored and serialized but not referenced
    by any argument kind, so evaluation never reads it.
    """

    objects: List[Object] = field(default_factory=list)
    primitives: List[Primitive] = field(default_factory=list)
    scale: Vector2 = DEFAULT_SCALE

    def __post_init__(self) -> None:
        self.scale = Vector2.of(self.scale)

    def add_object(self, obj: Object = None) -> Object:
        """Append *obj* (or a new empty object) and return it."""
        if obj is None:
            obj = Object()
        self.objects.append(obj)
        return obj
