# src/services/errors.py

"""Exceptions raised by offer search."""


class OfferSearchError(Exception):
    """Base class for offer search failures."""


class InvalidQueryError(OfferSearchError):
    """The request was rejected before any marketplace was called."""


class UpstreamError(OfferSearchError):
    """A marketplace call failed (HTTP error, timeout, malformed body)."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"{source}: {reason}")
        self.source = source
        self.reason = reason
