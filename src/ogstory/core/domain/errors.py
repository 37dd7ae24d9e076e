"""Failure kinds raised by the story pipeline.

Every stage raises a subclass of `OGStoryError`, so callers (CLI, tests,
future APIs) can catch a single type and still tell the stages apart.
"""

from __future__ import annotations


class OGStoryError(Exception):
    """Base class for every pipeline failure."""


class FetchFailure(OGStoryError):
    """Network error, non-success status or unusable payload for a remote resource."""

    def __init__(self, url: str, reason: str, *, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url!r}: {reason}")


class FetchTimeout(FetchFailure):
    """A fetch exceeded the configured timeout."""


class ParseFailure(OGStoryError):
    """Markup could not be parsed at all (distinct from missing og tags)."""


class RenderFailure(OGStoryError):
    """The vector document could not be built (fonts, template)."""


class EncodeFailure(OGStoryError):
    """The vector document could not be rasterized."""
