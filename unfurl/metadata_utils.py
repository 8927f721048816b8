from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

from unfurl import config
from unfurl.models import UnfurlResult
from unfurl.url_utils import ALLOWED_SCHEMES, safe_hostname

TITLE_MAX_CHARS = 200

TITLE_KEYS = ["og:title", "twitter:title"]
DESCRIPTION_KEYS = ["og:description", "twitter:description", "description"]
IMAGE_KEYS = ["og:image", "twitter:image"]
SITE_NAME_KEYS = ["og:site_name"]


def minimal_result(url: str) -> UnfurlResult:
    return UnfurlResult(url=url, title=safe_hostname(url) or url)


def pick_meta(metas, keys) -> str:
    """First non-empty content among <meta property|name=key>, in key order."""
    for key in keys:
        for tag in metas:
            names = {(tag.get("property") or "").strip().lower(), (tag.get("name") or "").strip().lower()}
            if key not in names:
                continue
            content = (tag.get("content") or "").strip()
            if content:
                return content
    return ""


def pick_title(soup: BeautifulSoup) -> str:
    if not soup.title:
        return ""
    return " ".join(soup.title.get_text().split())[:TITLE_MAX_CHARS]


def absolute_image(image: str, base: str) -> str:
    if not image:
        return ""
    try:
        resolved = urljoin(base, image)
        scheme = urlsplit(resolved).scheme.lower()
    except ValueError:
        return ""
    return resolved if scheme in ALLOWED_SCHEMES else ""


def extract_metadata(html: str, final_url: str, max_chars=None) -> UnfurlResult:
    max_chars = config.MAX_HTML_CHARS if max_chars is None else max_chars
    soup = BeautifulSoup((html or "")[:max_chars], "html.parser")
    metas = soup.find_all("meta")

    title = pick_meta(metas, TITLE_KEYS) or pick_title(soup) or safe_hostname(final_url)
    return UnfurlResult(
        url=final_url,
        title=title,
        description=pick_meta(metas, DESCRIPTION_KEYS),
        image=absolute_image(pick_meta(metas, IMAGE_KEYS), final_url),
        site_name=pick_meta(metas, SITE_NAME_KEYS),
    )
