import logging
import socket
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout

import requests
from requests.adapters import HTTPAdapter
from urllib3.connection import HTTPConnection, HTTPSConnection
from urllib3.connectionpool import HTTPConnectionPool, HTTPSConnectionPool

from unfurl import config
from unfurl.errors import FetchFailure, FetchTimeout
from unfurl.models import FetchedPage

logger = logging.getLogger(__name__)

CHUNK_SIZE = 16 * 1024

# sockets opened by the fetch running on this thread
_opened = threading.local()


class _TrackedConnectionMixin:
    def connect(self):
        super().connect()
        sockets = getattr(_opened, "sockets", None)
        if sockets is not None:
            sockets.append(self.sock)


class _TrackedHTTPConnection(_TrackedConnectionMixin, HTTPConnection):
    pass


class _TrackedHTTPSConnection(_TrackedConnectionMixin, HTTPSConnection):
    pass


class _TrackedHTTPPool(HTTPConnectionPool):
    ConnectionCls = _TrackedHTTPConnection


class _TrackedHTTPSPool(HTTPSConnectionPool):
    ConnectionCls = _TrackedHTTPSConnection


class TrackingAdapter(HTTPAdapter):
    """HTTPAdapter whose connections report their sockets so a deadline can cut them."""

    def init_poolmanager(self, *args, **kwargs):
        super().init_poolmanager(*args, **kwargs)
        self.poolmanager.pool_classes_by_scheme = {"http": _TrackedHTTPPool, "https": _TrackedHTTPSPool}


def page_headers():
    return {
        "User-Agent": config.USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9,he;q=0.8",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


def _charset(content_type: str) -> str:
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip("\"'")
    return "utf-8"


def _decode(raw: bytes, content_type: str) -> str:
    try:
        return raw.decode(_charset(content_type), errors="replace")
    except LookupError:
        return raw.decode("utf-8", errors="replace")


def _read_prefix(resp, max_bytes: int, cancelled: threading.Event) -> bytes:
    buf = bytearray()
    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
        if cancelled.is_set():
            raise FetchTimeout("cancelled while reading body")
        buf.extend(chunk)
        if len(buf) >= max_bytes:
            break
    return bytes(buf[:max_bytes])


def _abort(sockets):
    for sock in list(sockets):
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass


def _fetch(target_url, timeout, max_chars, sockets, cancelled) -> FetchedPage:
    _opened.sockets = sockets
    try:
        with requests.Session() as session:
            session.max_redirects = config.MAX_REDIRECTS
            adapter = TrackingAdapter()
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            resp = session.get(
                target_url,
                headers=page_headers(),
                timeout=timeout,
                allow_redirects=True,
                stream=True,
            )
            try:
                final_url = resp.url or target_url
                content_type = resp.headers.get("Content-Type", "") or ""
                page = FetchedPage(final_url, resp.status_code, content_type, "")
                if page.ok and page.is_html:
                    # utf-8 needs at most 4 bytes per character
                    raw = _read_prefix(resp, max_chars * 4, cancelled)
                    page = page._replace(body=_decode(raw, content_type)[:max_chars])
            finally:
                resp.close()
    except requests.Timeout as e:
        raise FetchTimeout(str(e)) from e
    except requests.RequestException as e:
        raise FetchFailure(str(e)) from e
    finally:
        _opened.sockets = None
    return page


def fetch_html(target_url: str, timeout=None, max_chars=None) -> FetchedPage:
    """GET a page following redirects, within a wall-clock deadline.

    The request runs on a worker thread; when the deadline passes every
    socket it opened is shut down and FetchTimeout is raised, however slowly
    the server is sending. The body is read only for 2xx HTML responses,
    and at most max_chars of it are kept. Other transport errors raise
    FetchFailure.
    """
    timeout = config.FETCH_TIMEOUT if timeout is None else timeout
    max_chars = config.MAX_HTML_CHARS if max_chars is None else max_chars

    sockets = []
    cancelled = threading.Event()
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="unfurl-fetch")
    future = pool.submit(_fetch, target_url, timeout, max_chars, sockets, cancelled)
    pool.shutdown(wait=False)
    try:
        page = future.result(timeout=timeout)
    except FutureTimeout:
        cancelled.set()
        _abort(sockets)
        raise FetchTimeout(f"no complete response from {target_url} within {timeout}s")

    logger.debug("fetched %s -> %s (%s, %s)", target_url, page.final_url, page.status, page.content_type)
    return page
