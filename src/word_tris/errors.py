from __future__ import annotations


class WordTrisError(Exception):
    """Base class for engine errors."""


class InvalidPlacement(WordTrisError):
    """Target cells are out of bounds, occupied, or do not match the piece."""


class AssetUnavailable(WordTrisError):
    """A dictionary asset could not be loaded."""


class MalformedPiece(WordTrisError):
    """Occupied-cell count and letter count disagree."""
