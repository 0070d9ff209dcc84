"""Error taxonomy for the board engine.

Every error subclasses :class:`HexBoardError`, itself a ``ValueError``, so
callers that only care about "bad input" can catch the builtin.
"""

from __future__ import annotations


class HexBoardError(ValueError):
    """Base class for all board engine errors."""


class InvalidCoordinate(HexBoardError):
    """A coordinate fails the predicate for the class it is used as."""


class InvalidTemplate(HexBoardError):
    """A board template document is malformed."""


class PoolSizeMismatch(HexBoardError):
    """A randomized-assignment pool does not match the number of targets."""


class InvalidAttributeKind(HexBoardError):
    """A tile attribute other than terrain type or number token was requested."""


class InvalidEntityKind(HexBoardError):
    """A store name other than tiles, roads, settlements or trading posts."""


class InvalidAttributeValue(HexBoardError):
    """A randomized-assignment pool holds an unknown terrain or out-of-range token."""
