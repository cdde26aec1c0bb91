"""
URL normalization and SSRF guard tests.
"""
import threading
import pytest
from unittest.mock import patch

from sitescore.errors import InvalidUrl
from sitescore.utils.urls import (
    domain_label, is_public_url, is_public_url_async, normalize_url, origin_of,
)


class TestNormalizeUrl:

    @pytest.mark.parametrize("raw,expected", [
        ("example.com", "https://example.com"),
        ("  example.com/  ", "https://example.com"),
        ("http://example.com/path/", "http://example.com/path"),
        ("https://example.com:8443/a", "https://example.com:8443/a"),
    ])
    def test_valid(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_is_required(self, raw):
        with pytest.raises(InvalidUrl, match="URL is required"):
            normalize_url(raw)

    @pytest.mark.parametrize("raw", ["https://", "exa mple.com", "https://example.com:abc", "ftp://x.com"])
    def test_malformed(self, raw):
        with pytest.raises(InvalidUrl, match="valid URL"):
            normalize_url(raw)


class TestUrlHelpers:

    def test_domain_label(self):
        assert domain_label("https://www.example.com/x") == "www"
        assert domain_label("https://acme.io") == "acme"
        assert domain_label("garbage") == "site"

    def test_origin(self):
        assert origin_of("https://example.com/a/b?c=1") == "https://example.com"


class TestSSRF:

    @pytest.mark.parametrize("url", [
        "http://127.0.0.1/admin",
        "http://10.0.0.5",
        "http://192.168.1.1",
        "http://169.254.169.254/latest/meta-data",
        "http://[::1]/",
        "ftp://example.com",
        "https:///nohost",
    ])
    def test_blocked(self, url):
        assert is_public_url(url) is False

    def test_public_ip_literal_allowed(self):
        assert is_public_url("https://8.8.8.8") is True

    def test_private_dns_answer_blocked(self):
        answer = [(2, 1, 6, "", ("192.168.0.10", 0))]
        with patch("sitescore.utils.urls.socket.getaddrinfo", return_value=answer):
            assert is_public_url("https://intranet.example.com") is False

    @pytest.mark.asyncio
    async def test_async_check_resolves_off_the_event_loop(self):
        loop_thread = threading.get_ident()
        resolver_threads = []

        def fake_getaddrinfo(host, port):
            resolver_threads.append(threading.get_ident())
            return [(2, 1, 6, "", ("93.184.216.34", 0))]

        with patch("sitescore.utils.urls.socket.getaddrinfo", side_effect=fake_getaddrinfo):
            assert await is_public_url_async("https://example.com") is True
        assert resolver_threads and resolver_threads[0] != loop_thread

    @pytest.mark.asyncio
    async def test_async_check_blocks_private_literal(self):
        assert await is_public_url_async("http://127.0.0.1/") is False
