"""
sitescore/utils/urls.py — URL normalization and SSRF guard.
"""
import asyncio
import ipaddress
import re
import socket
from urllib.parse import urlparse

from ..errors import InvalidUrl

BLOCKED = [
    ipaddress.ip_network("10.0.0.0/8"), ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"), ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("169.254.0.0/16"), ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"), ipaddress.ip_network("fc00::/7"),
]

INVALID_URL_HINT = "Please enter a valid URL (e.g., example.com or https://example.com)"
_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def normalize_url(raw: str) -> str:
    """Prefix bare domains with https://, drop a trailing slash, validate."""
    url = (raw or "").strip()
    if not url:
        raise InvalidUrl("URL is required")
    if not _SCHEME.match(url):
        url = f"https://{url}"
    try:
        p = urlparse(url)
        host = p.hostname
        _ = p.port  # raises ValueError on a non-numeric port
    except ValueError:
        raise InvalidUrl(INVALID_URL_HINT)
    if p.scheme not in ("http", "https") or not host or any(c.isspace() for c in url):
        raise InvalidUrl(INVALID_URL_HINT)
    return url.rstrip("/")


def hostname_of(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


def domain_label(url: str) -> str:
    """First label of the hostname: ``www.example.com`` → ``www``."""
    return hostname_of(url).split(".")[0] or "site"


def origin_of(url: str) -> str:
    p = urlparse(url)
    return f"{p.scheme}://{p.netloc}"


def is_public_url(url: str) -> bool:
    """False for private, loopback and link-local targets (IP literal or resolved)."""
    try:
        p = urlparse(url)
        if p.scheme not in ("http", "https") or not p.hostname:
            return False
        try:
            return not any(ipaddress.ip_address(p.hostname) in n for n in BLOCKED)
        except ValueError:
            pass
        for *_, sa in socket.getaddrinfo(p.hostname, None):
            if any(ipaddress.ip_address(sa[0]) in n for n in BLOCKED):
                return False
        return True
    except (OSError, ValueError):
        return False


async def is_public_url_async(url: str) -> bool:
    """``is_public_url`` with DNS resolution moved off the event loop."""
    return await asyncio.to_thread(is_public_url, url)
