"""
Content fetcher — retrieves a page's HTML with aiohttp, directly or through an
HTML relay, and probes /robots.txt and /sitemap.xml concurrently.
Redirects are followed here, hop by hop, so every Location can be vetted.
"""
import asyncio
import json
import logging
import time
from typing import Awaitable, Callable, Optional, Tuple
from urllib.parse import urljoin, urlparse

import aiohttp

from ..config import Settings, get_settings
from ..errors import FetchFailed, NoMetricsAvailable
from ..models import RawPage
from ..utils.urls import is_public_url_async, origin_of

logger = logging.getLogger(__name__)

ROBOTS_PATH = "/robots.txt"
SITEMAP_PATH = "/sitemap.xml"
MAX_REDIRECTS = 5
REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

UrlGuard = Callable[[str], Awaitable[bool]]


async def _request(
    session: aiohttp.ClientSession,
    url: str,
    timeout: float,
    params: Optional[dict] = None,
) -> Tuple[int, str, Optional[str]]:
    """One GET without following redirects: (status_code, body_text, Location)."""
    async with session.get(
        url,
        params=params,
        timeout=aiohttp.ClientTimeout(total=timeout),
        allow_redirects=False,
    ) as resp:
        body = await resp.text(errors="replace")
        return resp.status, body, resp.headers.get("Location")


async def _get(
    session: aiohttp.ClientSession,
    url: str,
    timeout: float,
    params: Optional[dict] = None,
    guard: Optional[UrlGuard] = None,
) -> Tuple[int, str]:
    """
    GET a URL, following up to MAX_REDIRECTS redirects, and return
    (status_code, body_text). Each redirect target must pass ``guard``.
    """
    for _ in range(MAX_REDIRECTS + 1):
        status, body, location = await _request(session, url, timeout, params)
        if status not in REDIRECT_STATUSES or not location:
            return status, body
        url, params = urljoin(url, location), None
        if guard is not None and not await guard(url):
            raise FetchFailed(f"Redirect to a blocked host: {url}")
    raise FetchFailed(f"Too many redirects (more than {MAX_REDIRECTS})")


def _guard_for(settings: Settings) -> Optional[UrlGuard]:
    return is_public_url_async if settings.block_private_hosts else None


def _require_http_url(url: str) -> None:
    try:
        p = urlparse(url)
        ok = p.scheme in ("http", "https") and bool(p.hostname)
    except ValueError:
        ok = False
    if not ok:
        raise FetchFailed(f"Malformed target URL: {url!r}")


def _check_status(status: int) -> None:
    if not 200 <= status < 300:
        raise FetchFailed(f"HTTP {status}")


async def _fetch_direct(session: aiohttp.ClientSession, url: str, settings: Settings) -> str:
    status, body = await _get(
        session, url, settings.request_timeout_seconds, guard=_guard_for(settings),
    )
    _check_status(status)
    if not body.strip():
        raise FetchFailed("No content received")
    return body


async def _fetch_via_relay(session: aiohttp.ClientSession, url: str, settings: Settings) -> str:
    """The relay answers with a JSON wrapper whose ``contents`` holds the page HTML."""
    status, body = await _get(
        session, settings.relay_url, settings.request_timeout_seconds,
        params={"url": url}, guard=_guard_for(settings),
    )
    _check_status(status)
    try:
        wrapper = json.loads(body)
    except ValueError:
        raise NoMetricsAvailable("Relay response is not valid JSON")
    html = wrapper.get("contents") if isinstance(wrapper, dict) else None
    if html is None:
        raise FetchFailed("Relay response is missing 'contents'")
    if not isinstance(html, str) or not html.strip():
        raise FetchFailed("No content received")
    return html


async def probe(
    session: aiohttp.ClientSession,
    url: str,
    timeout: float,
    guard: Optional[UrlGuard] = None,
) -> bool:
    """True iff ``url`` answers 2xx. Any failure is reported as False."""
    try:
        status, _ = await _get(session, url, timeout, guard=guard)
        return 200 <= status < 300
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError, FetchFailed) as e:
        logger.debug("Probe %s failed: %s", url, e)
        return False


async def _probe_well_known(
    session: aiohttp.ClientSession, url: str, settings: Settings,
) -> Tuple[bool, bool]:
    origin = origin_of(url)
    guard = _guard_for(settings)
    robots, sitemap = await asyncio.gather(
        probe(session, origin + ROBOTS_PATH, settings.probe_timeout_seconds, guard),
        probe(session, origin + SITEMAP_PATH, settings.probe_timeout_seconds, guard),
    )
    return robots, sitemap


async def _fetch(session: aiohttp.ClientSession, url: str, settings: Settings) -> RawPage:
    start = time.monotonic()
    try:
        if settings.fetch_mode == "relay":
            html = await _fetch_via_relay(session, url, settings)
        else:
            html = await _fetch_direct(session, url, settings)
    except asyncio.TimeoutError:
        raise FetchFailed(f"Request timed out after {settings.request_timeout_seconds}s")
    except aiohttp.ClientError as e:
        raise FetchFailed(f"Connection failed: {str(e)[:120]}")
    elapsed_ms = int((time.monotonic() - start) * 1000)

    robots = sitemap = None
    if settings.probe_well_known:
        robots, sitemap = await _probe_well_known(session, url, settings)

    return RawPage(
        html=html,
        source_url=url,
        fetch_duration_ms=elapsed_ms,
        has_robots_txt=robots,
        has_xml_sitemap=sitemap,
    )


async def fetch_page(
    url: str,
    session: Optional[aiohttp.ClientSession] = None,
    settings: Optional[Settings] = None,
) -> RawPage:
    """
    Fetch ``url`` once (no retry, no cache) and return a RawPage.
    Raises FetchFailed for every failure mode.
    """
    settings = settings or get_settings()
    _require_http_url(url)
    if session is not None:
        return await _fetch(session, url, settings)
    async with aiohttp.ClientSession(headers={"User-Agent": settings.user_agent}) as own:
        return await _fetch(own, url, settings)
