"""Operations over primitives and the argument indices that wire them up.

An object's operations form a flat, topologically sorted DAG: every
operation argument names either one of the object's primitives or an
*earlier* operation of the same object.  On disk each argument is one
little-endian 32-bit word with the :class:`ArgumentKind` in the low bit
and the index in the remaining 31 bits.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Tuple

from .errors import InvalidKindError

__all__ = [
    "OperationKind", "arity",
    "ArgumentKind", "ArgumentIndex",
    "object_primitive_index", "object_operation_index",
    "Operation",
    "MAX_ARGUMENT_INDEX",
]

_KIND_BITS = 1
_KIND_MASK = (1 << _KIND_BITS) - 1

MAX_ARGUMENT_INDEX = (1 << (32 - _KIND_BITS)) - 1


class OperationKind(enum.IntEnum):
    MIN = 0  # union
    MAX = 1  # intersection
    NEG = 2  # complement

    @classmethod
    def parse(cls, tag: int) -> OperationKind:
        """Return the kind for *tag*, raising :class:`InvalidKindError` if unknown."""
        try:
            return cls(tag)
        except ValueError:
            raise InvalidKindError(f"invalid operation kind {tag}") from None


_ARITY = {
    OperationKind.MIN: 2,
    OperationKind.MAX: 2,
    OperationKind.NEG: 1,
}


def arity(kind: OperationKind) -> int:
    """Number of arguments an operation of *kind* consumes."""
    return _ARITY[OperationKind.parse(kind)]


class ArgumentKind(enum.IntEnum):
    OBJECT_PRIMITIVE = 0
    OBJECT_OPERATION = 1


@dataclass(frozen=True)
class ArgumentIndex:
    """Reference to an object primitive or to a prior object operation."""

    kind: ArgumentKind
    index: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", ArgumentKind(self.kind))
        if not 0 <= self.index <= MAX_ARGUMENT_INDEX:
            raise ValueError(f"argument index {self.index} does not fit in 31 bits")

    def pack(self) -> int:
        """Return the 32-bit word: kind in the low bit, index above it."""
        return (self.index << _KIND_BITS) | int(self.kind)

    @classmethod
    def unpack(cls, word: int) -> ArgumentIndex:
        word &= 0xFFFFFFFF
        return cls(ArgumentKind(word & _KIND_MASK), word >> _KIND_BITS)


def object_primitive_index(i: int) -> ArgumentIndex:
    return ArgumentIndex(ArgumentKind.OBJECT_PRIMITIVE, i)


def object_operation_index(i: int) -> ArgumentIndex:
    return ArgumentIndex(ArgumentKind.OBJECT_OPERATION, i)


@dataclass(frozen=True)
class Operation:
    """One DAG node: a *kind* and exactly ``arity(kind)`` arguments."""

    kind: OperationKind
    args: Tuple[ArgumentIndex, ...]

    def __post_init__(self) -> None:
        kind = OperationKind.parse(self.kind)
        args = tuple(self.args)
        if len(args) != arity(kind):
            raise ValueError(
                f"{kind.name.lower()} takes {arity(kind)} argument(s), got {len(args)}"
            )
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "args", args)

    @classmethod
    def min(cls, a: ArgumentIndex, b: ArgumentIndex) -> Operation:
        return cls(OperationKind.MIN, (a, b))

    @classmethod
    def max(cls, a: ArgumentIndex, b: ArgumentIndex) -> Operation:
        return cls(OperationKind.MAX, (a, b))

    @classmethod
    def neg(cls, a: ArgumentIndex) -> Operation:
        return cls(OperationKind.NEG, (a,))
