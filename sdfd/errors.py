"""Exceptions raised by the sdfd package."""

from __future__ import annotations


class SDFDError(Exception):
    """Base class for every error raised by sdfd."""


class FormatError(SDFDError, ValueError):
    """The byte stream is not a valid sdfd container."""


class ShortReadError(FormatError):
    """The stream ended before a field could be read completely."""


class BadMagicError(FormatError):
    """The stream does not start with the ``sdfd`` magic bytes."""


class UnsupportedVersionError(FormatError):
    """The container version is newer than this reader supports."""


class InvalidKindError(FormatError):
    """A primitive or operation tag is not one of the defined kinds."""


class InvalidArgumentError(SDFDError, ValueError):
    """An operation argument does not resolve to an existing, prior slot."""
