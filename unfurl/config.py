import os

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)

FETCH_TIMEOUT: float = float(os.getenv("UNFURL_FETCH_TIMEOUT", "7"))
OEMBED_TIMEOUT: float = float(os.getenv("UNFURL_OEMBED_TIMEOUT", "7"))
MAX_HTML_CHARS: int = int(os.getenv("UNFURL_MAX_HTML_CHARS", "200000"))
MAX_REDIRECTS: int = int(os.getenv("UNFURL_MAX_REDIRECTS", "10"))
USER_AGENT: str = os.getenv("UNFURL_USER_AGENT", DEFAULT_USER_AGENT)
