import ipaddress
import re
import socket
from urllib.parse import urlsplit, SplitResult

import requests
from urllib3.util import parse_url

from unfurl.errors import InvalidTarget

ALLOWED_SCHEMES = {"http", "https"}

BLOCKED_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("0.0.0.0/32"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

# 127.1, 0x7f.0.0.1, 2130706433 and friends still reach the resolver as IPv4
_LEGACY_IPV4 = re.compile(r"^(0x[0-9a-f]*|[0-9]+)(\.(0x[0-9a-f]*|[0-9]+)){0,3}$")


def safe_hostname(url: str) -> str:
    try:
        return urlsplit(url).hostname or ""
    except ValueError:
        return ""


def host_is(host: str, domains) -> bool:
    h = (host or "").lower().rstrip(".")
    if h.startswith("www."):
        h = h[4:]
    return any(h == d or h.endswith("." + d) for d in domains)


def parse_ip_literal(host: str):
    """Return the address a literal IP hostname denotes, or None for names."""
    try:
        return ipaddress.ip_address(host)
    except ValueError:
        pass
    if _LEGACY_IPV4.match(host):
        try:
            return ipaddress.IPv4Address(socket.inet_aton(host))
        except OSError:
            return None
    return None


def is_private_ip(addr) -> bool:
    if addr.version == 6 and addr.ipv4_mapped:
        addr = addr.ipv4_mapped
    return any(addr.version == net.version and addr in net for net in BLOCKED_NETWORKS)


def _check_host(host: str) -> None:
    host = (host or "").rstrip(".")
    if not host:
        raise InvalidTarget("invalid host")
    if any(c.isspace() for c in host):
        raise InvalidTarget("invalid url")
    if host == "localhost" or host.endswith(".local"):
        raise InvalidTarget("blocked host")

    addr = parse_ip_literal(host)
    if addr is not None and is_private_ip(addr):
        raise InvalidTarget("blocked ip")


def _dialed_url(raw: str) -> str:
    """The URL as requests will send it, with characters like \\ percent-encoded."""
    try:
        prepared = requests.Request("GET", raw).prepare().url
        host = parse_url(prepared).host
    except (requests.RequestException, ValueError) as e:
        raise InvalidTarget("invalid url") from e
    if not prepared or not host:
        raise InvalidTarget("invalid host")
    return prepared


def validate_target_url(raw_url: str) -> SplitResult:
    """Parse a user supplied URL and refuse anything that could reach internal hosts.

    The host is checked both as written and as requests will dial it, and
    the returned URL is the dialed form. Only literal IP hostnames are
    checked against the blocked ranges; names are not resolved here.
    """
    raw = (raw_url or "").strip()
    try:
        parsed = urlsplit(raw)
        host = parsed.hostname
        parsed.port  # raises on a malformed port
    except ValueError as e:
        raise InvalidTarget("invalid url") from e

    if not parsed.scheme:
        raise InvalidTarget("invalid url")
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidTarget("invalid protocol")
    _check_host(host)

    prepared = _dialed_url(raw)
    try:
        parsed = urlsplit(prepared)
        host = parsed.hostname
    except ValueError as e:
        raise InvalidTarget("invalid url") from e
    if (host or "").lower() != parse_url(prepared).host.strip("[]").lower():
        raise InvalidTarget("invalid url")
    _check_host(host)

    return parsed
