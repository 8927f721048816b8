import logging

from unfurl.errors import FetchFailure, InvalidTarget
from unfurl.fetch_utils import fetch_html
from unfurl.metadata_utils import extract_metadata, minimal_result
from unfurl.models import UnfurlResult
from unfurl.oembed_utils import try_oembed
from unfurl.url_utils import validate_target_url

logger = logging.getLogger(__name__)


def unfurl(raw_url: str, fetch_timeout=None, oembed_timeout=None, max_chars=None) -> UnfurlResult:
    """Build a link preview for a user supplied URL.

    Raises InvalidTarget when the URL is rejected up front. Every later
    failure degrades to a minimal result instead of raising.
    """
    target_url = validate_target_url(raw_url).geturl()

    result = try_oembed(target_url, timeout=oembed_timeout)
    if result:
        return result

    try:
        page = fetch_html(target_url, timeout=fetch_timeout, max_chars=max_chars)
    except FetchFailure as e:
        logger.info("fetch failed for %s: %s", target_url, e)
        return minimal_result(target_url)

    try:
        validate_target_url(page.final_url)
    except InvalidTarget as e:
        logger.warning("unsafe redirect %s -> %s (%s)", target_url, page.final_url, e)
        return minimal_result(target_url)

    if not page.ok or not page.is_html:
        logger.debug("no preview for %s: status=%s content_type=%r", page.final_url, page.status, page.content_type)
        return minimal_result(page.final_url)

    return extract_metadata(page.body, page.final_url, max_chars=max_chars)
