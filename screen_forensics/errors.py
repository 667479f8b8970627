"""
screen_forensics.errors: Error kinds raised by the analysis core.

Every error carries a stable ``code`` string so that a host layer (see
:mod:`screen_forensics.bridge`) can translate it into its own error
reporting convention without string matching on messages.

The concrete classes also derive from the matching built-in exception
(``FileNotFoundError`` / ``ValueError``), so callers that only know the
standard library types still catch them.
"""

from __future__ import annotations


class ScreenForensicsError(Exception):
    """Base class for all errors raised by :mod:`screen_forensics`."""

    code = "ANALYSIS_ERROR"


class ImageNotFoundError(ScreenForensicsError, FileNotFoundError):
    """The supplied path does not reference an existing file."""

    code = "FILE_NOT_FOUND"


class ImageDecodeError(ScreenForensicsError, ValueError):
    """The file exists but cannot be decoded as a raster image."""

    code = "DECODE_ERROR"


class InvalidArgumentError(ScreenForensicsError, ValueError):
    """An argument (image path, configuration value) is absent or invalid."""

    code = "INVALID_ARGUMENT"
