from unfurl.errors import FetchFailure, FetchTimeout, InvalidTarget, UnfurlError
from unfurl.models import UnfurlResult
from unfurl.preview_utils import unfurl

__all__ = [
    "FetchFailure",
    "FetchTimeout",
    "InvalidTarget",
    "UnfurlError",
    "UnfurlResult",
    "unfurl",
]
