"""Exceptions raised at the I/O boundaries around the metadata engine.

The pure transformations never raise for well-typed input; these errors come
from reading source containers and from writer collaborators.
"""

from __future__ import annotations


class MetadataError(Exception):
    """Base error carrying a numeric support code (rendered as MX-<code>)."""

    code: int = 1090
    default_message = "Unexpected metadata error"

    def __init__(self, message: str | None = None, path: str | None = None) -> None:
        self.path = path
        self.message = message or self.default_message
        super().__init__(f"{self.message} (MX-{self.code})")


class ReadFailedError(MetadataError):
    """The property snapshot could not be parsed from the source bytes."""

    code = 1010
    default_message = "Could not read image metadata"


class WriteFailedError(MetadataError):
    """The writer could not produce the destination container."""

    code = 1011
    default_message = "Could not write image metadata"


class UnsupportedMediaTypeError(MetadataError):
    """The source is not a still-image container (e.g. a video)."""

    code = 1012
    default_message = "Media type is not supported"
