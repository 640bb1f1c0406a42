"""Exception hierarchy shared across chessmirror layers."""

from __future__ import annotations


class ChessMirrorError(Exception):
    """Base class for all chessmirror errors."""


class SnapshotFormatError(ChessMirrorError, ValueError):
    """Raised when a serialized snapshot cannot be decoded."""


class SelectorError(ChessMirrorError, ValueError):
    """Raised when a CSS selector uses unsupported syntax."""


class PageSourceError(ChessMirrorError):
    """Raised when the live document cannot be read from the browser."""


class AnalyzerError(ChessMirrorError):
    """Raised when the external analysis engine cannot be driven."""
