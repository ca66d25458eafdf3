"""Tests for sdfd/serialization.py — the binary ``.sdfd`` container."""

import logging
import struct

import pytest

from sdfd import (
    BadMagicError,
    Circle,
    DEFAULT_SCALE,
    FormatError,
    InvalidKindError,
    MAGIC,
    Object,
    OperationKind,
    Plane,
    Primitive,
    SDFD_VERSION,
    Scene,
    ShortReadError,
    UnsupportedVersionError,
    dumps,
    load_from_file,
    loads,
    object_operation_index,
    plane_from_point_and_angle,
    plane_from_points,
    store_to_file,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _mixed_scene() -> Scene:
    """Two objects, every primitive kind, five operations."""
    scene = Scene()

    first = scene.add_object()
    a = first.add_primitive(plane_from_points((0.1, 0.2), (5.3, 7.7)))
    b = first.add_primitive(Circle((32.5, -1.25), 12.0))
    c = first.add_primitive(0.75)
    u = first.add_operation(OperationKind.MIN, a, b)
    n = first.add_operation(OperationKind.NEG, c)
    first.add_operation(OperationKind.MAX, u, n)

    second = scene.add_object()
    d = second.add_primitive(plane_from_point_and_angle((3.0, 4.0), 0.4))
    e = second.add_primitive(Circle((0.0, 0.0), 3.3))
    i = second.add_operation(OperationKind.MAX, d, e)
    second.add_operation(OperationKind.NEG, i)

    scene.primitives.append(Primitive.circle(Circle((1, 2), 3)))
    scene.primitives.append(Primitive.scalar(-2.0))
    return scene


def _header(version: int = SDFD_VERSION) -> bytes:
    return MAGIC + struct.pack("<H", version)


# ===========================================================================
# Layout
# ===========================================================================

class TestLayout:
    def test_empty_scene(self):
        assert dumps(Scene()) == b"sdfd" + b"\x00\x00" + b"\x00" * 8

    def test_single_circle_object(self):
        scene = Scene()
        scene.add_object().add_primitive(Circle((1.0, 2.0), 3.0))
        expected = (
            _header()
            + struct.pack("<I", 1)                  # objects
            + struct.pack("<I", 1)                  # primitives
            + struct.pack("<H3f", 5, 1.0, 2.0, 3.0)
            + struct.pack("<I", 0)                  # operations
            + struct.pack("<I", 0)                  # scene primitives
        )
        assert dumps(scene) == expected

    def test_operation_arguments_use_arity_words(self):
        scene = Scene()
        obj = scene.add_object()
        a = obj.add_primitive(1.0)
        n = obj.add_operation(OperationKind.NEG, a)
        obj.add_operation(OperationKind.MIN, a, n)
        expected = (
            _header()
            + struct.pack("<I", 1)
            + struct.pack("<I", 1) + struct.pack("<Hf", 0, 1.0)
            + struct.pack("<I", 2)
            + struct.pack("<HI", 2, 0)              # neg(prim 0)
            + struct.pack("<HII", 0, 0, 1)          # min(prim 0, op 0)
            + struct.pack("<I", 0)
        )
        assert dumps(scene) == expected

    def test_plane_payload(self):
        scene = Scene(primitives=[Primitive.plane(Plane((0.0, 1.0), -4.5))])
        assert dumps(scene).endswith(struct.pack("<IH3f", 1, 4, 0.0, 1.0, -4.5))

    def test_mixed_scene_is_compact(self):
        assert len(dumps(_mixed_scene())) <= 256


# ===========================================================================
# Round trip
# ===========================================================================

class TestRoundTrip:
    def test_bytes(self):
        scene = _mixed_scene()
        assert loads(dumps(scene)) == scene

    def test_file(self, tmp_path):
        scene = _mixed_scene()
        path = tmp_path / "scene.sdfd"
        assert store_to_file(scene, path)
        loaded = load_from_file(path)
        assert loaded == scene
        assert dumps(loaded) == path.read_bytes()

    def test_scale_is_not_stored(self, tmp_path):
        scene = _mixed_scene()
        scene.scale = (3, 1)
        path = tmp_path / "scaled.sdfd"
        assert store_to_file(scene, str(path))
        loaded = load_from_file(str(path))
        assert loaded.scale == DEFAULT_SCALE
        assert loaded.objects == scene.objects
        assert loaded.primitives == scene.primitives

    def test_malformed_dag_survives(self):
        scene = Scene()
        obj = scene.add_object()
        a = obj.add_primitive(1.0)
        obj.add_operation(OperationKind.MIN, object_operation_index(1), a)
        obj.add_operation(OperationKind.NEG, a)
        assert loads(dumps(scene)) == scene

    def test_trailing_bytes_ignored(self):
        scene = _mixed_scene()
        assert loads(dumps(scene) + b"\x00junk") == scene


# ===========================================================================
# Failures
# ===========================================================================

class TestLoadFailures:
    def test_bad_magic(self):
        data = bytearray(dumps(Scene()))
        data[0:4] = b"SDFD"
        with pytest.raises(BadMagicError):
            loads(bytes(data))

    def test_newer_version(self):
        data = _header(SDFD_VERSION + 1) + b"\x00" * 8
        with pytest.raises(UnsupportedVersionError):
            loads(data)

    def test_every_truncation_fails(self):
        data = dumps(_mixed_scene())
        for n in range(len(data)):
            with pytest.raises(FormatError):
                loads(data[:n])

    def test_truncation_is_short_read(self):
        with pytest.raises(ShortReadError):
            loads(b"sd")

    @pytest.mark.parametrize("tag", [1, 2, 3, 6])
    def test_unknown_primitive_kind(self, tag):
        data = _header() + struct.pack("<IIH", 1, 1, tag) + b"\x00" * 16
        with pytest.raises(InvalidKindError):
            loads(data)

    def test_unknown_operation_kind(self):
        data = _header() + struct.pack("<IIIH", 1, 0, 1, 3) + b"\x00" * 16
        with pytest.raises(InvalidKindError):
            loads(data)

    def test_huge_count_is_short_read(self):
        data = _header() + struct.pack("<I", 0xFFFFFFFF)
        with pytest.raises(ShortReadError):
            loads(data)

    def test_load_from_file_returns_none(self, tmp_path, caplog):
        path = tmp_path / "bad.sdfd"
        path.write_bytes(b"nope")
        with caplog.at_level(logging.WARNING, logger="sdfd.serialization"):
            assert load_from_file(path) is None
        assert "failed to load" in caplog.text

    def test_missing_file_returns_none(self, tmp_path):
        assert load_from_file(tmp_path / "missing.sdfd") is None


class TestStoreFailures:
    def test_unwritable_path(self, tmp_path):
        assert store_to_file(Scene(), tmp_path / "no" / "such" / "dir.sdfd") is False

    def test_directory_path(self, tmp_path):
        assert store_to_file(Scene(), tmp_path) is False
