"""Telegram connection strings and the HTTP session they describe.

Three forms are accepted::

    <bot_token>                                  direct connection
    https://api.telegram.org/bot<token>/...      full endpoint, used as-is
    <bot_token>|<scheme>://user:password@ip:port through a proxy

An ``http``/``https`` proxy scheme tunnels through an HTTP proxy with TLS
verification disabled; ``socks5``/``socks5h`` goes through a SOCKS5 proxy
(requires the ``requests[socks]`` extra).
"""

from __future__ import annotations

from urllib.parse import urlsplit

import requests
from pydantic import BaseModel, ConfigDict

TELEGRAM_API_PREFIX = "https://api.telegram.org/bot"
TELEGRAM_SEND_URL = TELEGRAM_API_PREFIX + "{token}/sendMessage"

_SOCKS_SCHEMES = frozenset({"socks5", "socks5h"})


class TelegramConfigError(ValueError):
    """Raised when a Telegram sink is configured with unusable settings."""


class TelegramEndpoint(BaseModel):
    """Where and how to POST messages."""

    model_config = ConfigDict(frozen=True)

    url: str
    proxy_url: str | None = None
    verify: bool = True


def parse_connection_string(conn: str) -> TelegramEndpoint:
    """Parse a connection string into a ``TelegramEndpoint``.

    Raises
    ------
    TelegramConfigError
        On an empty string, more than one ``|`` separator or an
        unsupported proxy scheme.
    """
    if not conn:
        raise TelegramConfigError("Empty telegram connection string")

    parts = conn.split("|")
    if len(parts) == 1:
        if conn.startswith(TELEGRAM_API_PREFIX):
            return TelegramEndpoint(url=conn)
        return TelegramEndpoint(url=TELEGRAM_SEND_URL.format(token=conn))

    if len(parts) == 2:
        token, proxy_url = parts
        url = TELEGRAM_SEND_URL.format(token=token)
        scheme = urlsplit(proxy_url).scheme.lower()
        if scheme.startswith("http"):
            return TelegramEndpoint(url=url, proxy_url=proxy_url, verify=False)
        if scheme in _SOCKS_SCHEMES:
            return TelegramEndpoint(url=url, proxy_url=proxy_url)
        raise TelegramConfigError("Invalid proxy schema")

    raise TelegramConfigError("Invalid connection string format")


def build_session(endpoint: TelegramEndpoint) -> requests.Session:
    """Return a ``requests.Session`` routed the way *endpoint* asks."""
    session = requests.Session()
    session.headers["Content-Type"] = "application/json"
    if endpoint.proxy_url:
        session.proxies.update({"http": endpoint.proxy_url, "https": endpoint.proxy_url})
    session.verify = endpoint.verify
    return session
