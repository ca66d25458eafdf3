"""Binary ``.sdfd`` container: one symmetric procedure for reading and writing.

Layout (little-endian, tightly packed)
--------------------------------------
::

    magic               4 bytes   b"sdfd"
    version             u16       SDFD_VERSION
    object_count        u32
      primitive_count   u32
        kind            u16       PrimitiveKind tag
        payload         f32 x 1 (scalar) or f32 x 3 (plane, circle)
      operation_count   u32
        kind            u16       OperationKind tag
        args            u32 x arity(kind)   packed ArgumentIndex words
    scene_prim_count    u32
      primitives        as above

The scene scale is not stored; a loaded scene always has scale ``(1, 1)``.

The same ``_serialize_*`` functions drive both directions.  While reading
they are handed ``None`` in place of the value and return what they read;
while writing they return the value they were given.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .errors import BadMagicError, FormatError, SDFDError, ShortReadError, UnsupportedVersionError
from .operations import ArgumentIndex, Operation, OperationKind, arity
from .primitives import Circle, Plane, Primitive, PrimitiveKind
from .scene import Object, Scene

__all__ = [
    "MAGIC", "SDFD_VERSION",
    "dumps", "loads",
    "store_to_file", "load_from_file",
]

logger = logging.getLogger(__name__)

MAGIC = b"sdfd"
SDFD_VERSION = 0

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")
_F32X3 = struct.Struct("<3f")
_ARGS = {n: struct.Struct(f"<{n}I") for n in (1, 2)}

_PathLike = Union[str, Path]


class _Serializer:
    """Cursor over an input buffer (reading) or an output buffer (writing)."""

    def __init__(self, data: Optional[bytes] = None) -> None:
        self.reading = data is not None
        self._data = memoryview(data) if data is not None else None
        self._offset = 0
        self.buffer = bytearray()

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset if self.reading else 0

    def _take(self, size: int) -> memoryview:
        end = self._offset + size
        if end > len(self._data):
            raise ShortReadError(
                f"needed {size} bytes at offset {self._offset}, "
                f"only {len(self._data) - self._offset} left"
            )
        chunk = self._data[self._offset:end]
        self._offset = end
        return chunk

    def raw(self, payload: bytes) -> bytes:
        if self.reading:
            return bytes(self._take(len(payload)))
        self.buffer += payload
        return payload

    def values(self, fmt: struct.Struct, values: Optional[Sequence]) -> tuple:
        if self.reading:
            return fmt.unpack(self._take(fmt.size))
        self.buffer += fmt.pack(*values)
        return tuple(values)

    def value(self, fmt: struct.Struct, value=None):
        return self.values(fmt, None if self.reading else (value,))[0]

    def sequence(self, items: List, serialize_item: Callable) -> None:
        """Serialize a u32 count followed by each item, refilling *items* on read."""
        count = self.value(_U32, len(items))
        if self.reading:
            items[:] = [serialize_item(None) for _ in range(count)]
        else:
            for item in items:
                serialize_item(item)


# ===========================================================================
# Symmetric procedures
# ===========================================================================

def _serialize_primitive(s: _Serializer, primitive: Optional[Primitive]) -> Primitive:
    kind = PrimitiveKind.parse(s.value(_U16, primitive.kind if primitive else None))
    value = primitive.value if primitive else None

    if kind is PrimitiveKind.SCALAR:
        return Primitive(kind, s.value(_F32, value))
    if kind is PrimitiveKind.PLANE:
        fields = (value.normal.x, value.normal.y, value.offset) if value else None
        nx, ny, offset = s.values(_F32X3, fields)
        return Primitive(kind, Plane((nx, ny), offset))
    if kind is PrimitiveKind.CIRCLE:
        fields = (value.center.x, value.center.y, value.radius) if value else None
        cx, cy, radius = s.values(_F32X3, fields)
        return Primitive(kind, Circle((cx, cy), radius))
    raise ValueError(f"unhandled primitive kind {kind!r}")


def _serialize_operation(s: _Serializer, operation: Optional[Operation]) -> Operation:
    kind = OperationKind.parse(s.value(_U16, operation.kind if operation else None))
    words = [arg.pack() for arg in operation.args] if operation else None
    words = s.values(_ARGS[arity(kind)], words)
    return Operation(kind, tuple(ArgumentIndex.unpack(word) for word in words))


def _serialize_object(s: _Serializer, obj: Optional[Object]) -> Object:
    if obj is None:
        obj = Object()
    s.sequence(obj.primitives, lambda p: _serialize_primitive(s, p))
    s.sequence(obj.operations, lambda o: _serialize_operation(s, o))
    return obj


def _serialize_scene(s: _Serializer, scene: Optional[Scene]) -> Scene:
    if scene is None:
        scene = Scene()

    magic = s.raw(MAGIC)
    if magic != MAGIC:
        raise BadMagicError(f"bad magic {magic!r}, expected {MAGIC!r}")

    version = s.value(_U16, SDFD_VERSION)
    if version > SDFD_VERSION:
        raise UnsupportedVersionError(
            f"container version {version} is newer than supported version {SDFD_VERSION}"
        )

    s.sequence(scene.objects, lambda o: _serialize_object(s, o))
    s.sequence(scene.primitives, lambda p: _serialize_primitive(s, p))
    return scene


# ===========================================================================
# Public entry points
# ===========================================================================

def dumps(scene: Scene) -> bytes:
    """Encode *scene* as an ``.sdfd`` container.

    Raises ``struct.error`` if a list is too long for its u32 count.
    """
    s = _Serializer()
    _serialize_scene(s, scene)
    return bytes(s.buffer)


def loads(data: bytes) -> Scene:
    """Decode an ``.sdfd`` container.

    Raises a :class:`~sdfd.errors.FormatError` subclass on short input, bad
    magic, an unsupported version or an unknown primitive/operation kind.
    """
    s = _Serializer(bytes(data))
    scene = _serialize_scene(s, None)
    if s.remaining:
        logger.debug("ignoring %d trailing bytes after scene", s.remaining)
    return scene


def store_to_file(scene: Scene, path: _PathLike) -> bool:
    """Write *scene* to *path*; return ``False`` if it could not be stored."""
    try:
        data = dumps(scene)
        with open(path, "wb") as f:
            f.write(data)
    except (OSError, struct.error, SDFDError) as exc:
        logger.warning("failed to store scene to %s: %s", path, exc)
        return False
    logger.debug("stored %d objects (%d bytes) to %s", len(scene.objects), len(data), path)
    return True


def load_from_file(path: _PathLike) -> Optional[Scene]:
    """Read a scene from *path*; return ``None`` on any I/O or format error."""
    try:
        with open(path, "rb") as f:
            data = f.read()
        scene = loads(data)
    except (OSError, FormatError) as exc:
        logger.warning("failed to load scene from %s: %s", path, exc)
        return None
    logger.debug("loaded %d objects from %s", len(scene.objects), path)
    return scene
