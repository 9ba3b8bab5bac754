"""Unit tests for Telegram connection-string parsing and session setup."""

from __future__ import annotations

import pytest
import requests

from fanlog.routing.sinks._transport import (
    TelegramConfigError,
    TelegramEndpoint,
    build_session,
    parse_connection_string,
)


class TestParseConnectionString:
    def test_bare_token(self):
        endpoint = parse_connection_string("123:abc")
        assert endpoint == TelegramEndpoint(
            url="https://api.telegram.org/bot123:abc/sendMessage"
        )

    def test_full_api_url_used_as_is(self):
        endpoint = parse_connection_string("https://api.telegram.org/bot<id>/")
        assert endpoint.url == "https://api.telegram.org/bot<id>/"
        assert endpoint.proxy_url is None
        assert endpoint.verify is True

    @pytest.mark.parametrize("scheme", ["http", "https"])
    def test_http_proxy_disables_verification(self, scheme):
        endpoint = parse_connection_string(f"<bot_id>|{scheme}://user:password@ip:8080")
        assert endpoint.url == "https://api.telegram.org/bot<bot_id>/sendMessage"
        assert endpoint.proxy_url == f"{scheme}://user:password@ip:8080"
        assert endpoint.verify is False

    @pytest.mark.parametrize("scheme", ["socks5", "socks5h"])
    def test_socks5_proxy(self, scheme):
        endpoint = parse_connection_string(f"tok|{scheme}://10.0.0.1:1080")
        assert endpoint.proxy_url == f"{scheme}://10.0.0.1:1080"
        assert endpoint.verify is True

    @pytest.mark.parametrize("proxy", ["ftp://host:21", "socks4://host:1080", "no-scheme"])
    def test_invalid_proxy_scheme(self, proxy):
        with pytest.raises(TelegramConfigError, match="Invalid proxy schema"):
            parse_connection_string(f"tok|{proxy}")

    def test_too_many_parts(self):
        with pytest.raises(TelegramConfigError, match="Invalid connection string format"):
            parse_connection_string("a|b|c")

    def test_empty(self):
        with pytest.raises(TelegramConfigError, match="Empty telegram connection string"):
            parse_connection_string("")


class TestBuildSession:
    def test_direct_session(self):
        session = build_session(TelegramEndpoint(url="https://example.invalid"))
        try:
            assert isinstance(session, requests.Session)
            assert session.headers["Content-Type"] == "application/json"
            assert session.verify is True
        finally:
            session.close()

    def test_proxied_session(self):
        endpoint = parse_connection_string("tok|http://10.0.0.1:3128")
        session = build_session(endpoint)
        try:
            assert session.proxies == {
                "http": "http://10.0.0.1:3128",
                "https": "http://10.0.0.1:3128",
            }
            assert session.verify is False
        finally:
            session.close()
