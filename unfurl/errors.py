class UnfurlError(Exception):
    """Base class for link preview errors."""


class InvalidTarget(UnfurlError, ValueError):
    """The URL is malformed, uses a disallowed scheme, or points at a blocked host."""


class FetchFailure(UnfurlError):
    """The generic page fetch failed at the transport level."""


class FetchTimeout(FetchFailure):
    """The page fetch did not complete before its deadline."""
