import logging
from urllib.parse import parse_qs, quote, urlsplit

import requests

from unfurl import config
from unfurl.models import ProviderMatch, UnfurlResult
from unfurl.url_utils import host_is, safe_hostname

logger = logging.getLogger(__name__)

# provider -> (domains, endpoint template, site name)
OEMBED_PROVIDERS = {
    "youtube": (("youtube.com", "youtu.be"), "https://www.youtube.com/oembed?format=json&url={url}", "YouTube"),
    "tiktok": (("tiktok.com",), "https://www.tiktok.com/oembed?url={url}", "TikTok"),
    "instagram": (("instagram.com",), "https://www.instagram.com/oembed/?url={url}", "Instagram"),
}

YOUTUBE_PATH_MARKERS = {"shorts", "live", "embed"}


def oembed_headers():
    return {
        "User-Agent": config.USER_AGENT,
        "Accept": "application/json",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


def extract_youtube_id(target_url: str) -> str | None:
    try:
        p = urlsplit(target_url)
    except ValueError:
        return None
    host = (p.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    parts = [s for s in p.path.split("/") if s]

    if host == "youtu.be":
        return parts[0] if parts else None

    if host_is(host, ["youtube.com"]):
        v = parse_qs(p.query).get("v")
        if v and v[0]:
            return v[0]
        for i, part in enumerate(parts[:-1]):
            if part in YOUTUBE_PATH_MARKERS:
                return parts[i + 1]
    return None


def normalize_youtube_url(target_url: str) -> str:
    video_id = extract_youtube_id(target_url)
    return f"https://www.youtube.com/watch?v={video_id}" if video_id else target_url


def match_provider(target_url: str) -> ProviderMatch | None:
    host = safe_hostname(target_url)
    if not host:
        return None
    for provider, (domains, endpoint, site_name) in OEMBED_PROVIDERS.items():
        if host_is(host, domains):
            query_url = normalize_youtube_url(target_url) if provider == "youtube" else target_url
            return ProviderMatch(provider, site_name, endpoint.format(url=quote(query_url, safe="")))
    return None


def parse_oembed(data, target_url: str, site_name: str) -> UnfurlResult | None:
    """Map an oEmbed JSON document onto a preview, or None if it is not one."""
    if not isinstance(data, dict):
        return None
    title = data.get("title")
    thumbnail = data.get("thumbnail_url")
    if not isinstance(title, str) and not isinstance(thumbnail, str):
        return None
    return UnfurlResult(
        url=target_url,
        title=title if isinstance(title, str) else safe_hostname(target_url),
        description="",
        image=thumbnail if isinstance(thumbnail, str) else "",
        site_name=site_name,
    )


def try_oembed(target_url: str, timeout=None) -> UnfurlResult | None:
    match = match_provider(target_url)
    if not match:
        return None

    try:
        r = requests.get(
            match.oembed_url,
            headers=oembed_headers(),
            timeout=config.OEMBED_TIMEOUT if timeout is None else timeout,
        )
        if not r.ok:
            logger.info("oembed %s returned %s for %s", match.provider, r.status_code, target_url)
            return None
        data = r.json()
    except requests.RequestException as e:
        logger.info("oembed %s failed for %s: %s", match.provider, target_url, e)
        return None
    except ValueError:
        logger.info("oembed %s returned invalid json for %s", match.provider, target_url)
        return None

    result = parse_oembed(data, target_url, match.site_name)
    if result is None:
        logger.info("oembed %s response for %s has no usable fields", match.provider, target_url)
    return result
