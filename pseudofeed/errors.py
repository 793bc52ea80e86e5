"""Exceptions raised by the feed store, renderer and configuration layer.

File-system failures on the feed file are raised as ``FeedReadError`` or
``FeedWriteError``, which are also ``OSError``s.  Everything the package raises
derives from ``FeedError`` so the HTTP layer can map it to a
``500`` with a ``{"error", "raw"}`` body.
"""

from __future__ import annotations


class FeedError(Exception):
    """Base class for pseudofeed errors."""

    message = "Feed error"


class FeedParseError(FeedError):
    """The stored document is not valid JSON or not a valid JSON Feed."""

    message = "Error parsing stored feed"


class FeedValidationError(FeedError):
    """A document built in memory does not satisfy the feed schema."""

    message = "Generated invalid feed"


class FeedRenderError(FeedError):
    """A template failed to render, or a stored date could not be formatted."""

    message = "Error executing template"


class FeedConfigError(FeedError):
    """Configuration could not be resolved; fatal at startup."""

    message = "Invalid configuration"


class FeedReadError(FeedError, OSError):
    """The feed file could not be read."""

    message = "Error reading file"


class FeedWriteError(FeedError, OSError):
    """The feed file could not be written."""

    message = "Error writing file"
