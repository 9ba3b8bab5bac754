"""Telegram sink — batches records and ships them to the Bot API on a timer.

``write`` only appends to an in-memory buffer; a background thread owned by
the sink wakes every ``flush_interval`` seconds and POSTs the whole buffer
as ``{"chat_id": ..., "text": ...}`` to each configured chat, in order.

The buffer is cleared only when every chat accepted the text.  If any
request fails the cycle stops, the buffer is left exactly as it was and the
next tick retries the full text plus whatever arrived since.  Delivery is
therefore at-least-once per chat: a chat that succeeded before another one
failed receives the same text again on the retry.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Callable

import requests
from pydantic import BaseModel, ValidationError

from fanlog.routing.sinks._formatting import format_timestamp, utc_now
from fanlog.routing.sinks._transport import (
    TelegramConfigError,
    TelegramEndpoint,
    build_session,
    parse_connection_string,
)

logger = logging.getLogger(__name__)

__all__ = [
    "TelegramConfigError",
    "TelegramDeliveryError",
    "TelegramResponse",
    "TelegramSink",
]

_HEADER_PREFIX = b"=== "
_HEADER_SUFFIX = b" ===\n"


class TelegramDeliveryError(RuntimeError):
    """Raised when a flush could not deliver the buffer to every chat."""


class TelegramResponse(BaseModel):
    """The Bot API response envelope (only the fields we report on)."""

    ok: bool | None = None
    error_code: int | None = None
    description: str = ""
    parameters: Any = None
    result: Any = None


class TelegramSink:
    """Buffers records and delivers them to Telegram chats periodically.

    Parameters
    ----------
    conn:
        Bot token, full ``sendMessage`` URL, or ``<token>|<proxy-url>``.
    chat_ids:
        Recipient chat ids, delivered to in this order.
    flush_interval:
        Seconds between flush attempts of the background thread.
    timeout:
        Per-request timeout in seconds.  The buffer lock is held for the
        whole flush, so this also bounds how long ``write`` can stall.
    session:
        An existing ``requests.Session`` (or compatible object) to post
        through.  Built from *conn* when omitted.
    autostart:
        Start the flush thread from the constructor.

    Raises
    ------
    TelegramConfigError
        If *conn* or *chat_ids* is empty, or *conn* is malformed.
    """

    def __init__(
        self,
        conn: str,
        chat_ids: list[str],
        *,
        flush_interval: float = 1.0,
        timeout: float = 10.0,
        session: Any | None = None,
        clock: Callable[[], datetime] | None = None,
        autostart: bool = True,
    ) -> None:
        if not conn:
            raise TelegramConfigError("Empty telegram connection string")
        if not chat_ids:
            raise TelegramConfigError("Empty telegram chat ids")

        self._endpoint = parse_connection_string(conn)
        self._chat_ids = [str(chat_id) for chat_id in chat_ids]
        self._flush_interval = flush_interval
        self._timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else build_session(self._endpoint)
        self._clock = clock or utc_now

        self._buffer = bytearray()
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None
        self._closed = False

        if autostart:
            self.start()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def sink_id(self) -> str:
        return "telegram"

    @property
    def endpoint(self) -> TelegramEndpoint:
        return self._endpoint

    @property
    def chat_ids(self) -> list[str]:
        return list(self._chat_ids)

    @property
    def pending_bytes(self) -> int:
        """Number of buffered bytes awaiting delivery."""
        return len(self._buffer)

    def snapshot(self) -> bytes:
        """Return a copy of the buffer."""
        with self._lock:
            return bytes(self._buffer)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ------------------------------------------------------------------
    # Write / flush
    # ------------------------------------------------------------------

    def write(self, data: bytes) -> int:
        """Frame *data* with a timestamp header and append it to the buffer.

        Never touches the network.  Once the sink is closed nothing drains
        the buffer any more, so writes are dropped with a warning.
        """
        if not data:
            return 0
        if self._closed:
            logger.warning("TelegramSink is closed, dropping %d bytes", len(data))
            return 0
        stamp = format_timestamp(self._clock()).encode("ascii")
        with self._lock:
            self._buffer += _HEADER_PREFIX
            self._buffer += stamp
            self._buffer += _HEADER_SUFFIX
            self._buffer += data
        return len(data)

    def flush(self) -> int:
        """Deliver the buffered text to every chat.

        Returns the number of bytes delivered (``0`` if the buffer was
        empty).  The buffer is cleared only after all chats succeed.

        Raises
        ------
        TelegramDeliveryError
            On the first chat that could not be delivered to; remaining
            chats are skipped and the buffer is kept intact.
        """
        with self._lock:
            size = len(self._buffer)
            if size == 0:
                return 0
            text = self._buffer.decode("utf-8", errors="replace")
            for chat_id in self._chat_ids:
                self._post(chat_id, text)
            del self._buffer[:]
        logger.debug("Telegram flush delivered %d bytes to %d chats", size, len(self._chat_ids))
        return size

    def _post(self, chat_id: str, text: str) -> None:
        options: dict[str, Any] = {"timeout": self._timeout, "verify": self._endpoint.verify}
        if self._endpoint.proxy_url:
            options["proxies"] = {
                "http": self._endpoint.proxy_url,
                "https": self._endpoint.proxy_url,
            }
        try:
            response = self._session.post(
                self._endpoint.url,
                json={"chat_id": chat_id, "text": text},
                **options,
            )
        except requests.RequestException as exc:
            raise TelegramDeliveryError(
                f"Failed send message to telegram: {exc}"
            ) from exc

        if response.status_code != 200:
            raise TelegramDeliveryError(
                f"Failed send message to telegram: {_describe_failure(response)}"
            )

        payload = _parse_response(response.content)
        if payload is not None and payload.ok is False:
            raise TelegramDeliveryError(
                f"Failed send message to telegram: {_describe_payload(payload)}"
            )

    # ------------------------------------------------------------------
    # Background flushing
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background flush thread (no-op if already running)."""
        if self._closed:
            logger.warning("TelegramSink is closed, not starting the flush thread")
            return
        if self.is_running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(
            target=self._run, name="fanlog-telegram-flush", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while not self._stopped.wait(self._flush_interval):
            try:
                self.flush()
            except TelegramDeliveryError as exc:
                logger.warning(
                    "Telegram flush failed, keeping %d bytes for retry: %s",
                    self.pending_bytes,
                    exc,
                )
            except Exception:  # noqa: BLE001
                logger.exception("Unexpected error in telegram flush thread")

    def close(self, timeout: float | None = None) -> None:
        """Stop the flush thread and make one final delivery attempt.

        Closing is final: later writes are dropped and ``start`` is a no-op.
        """
        self._closed = True
        self._stopped.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None

        try:
            self.flush()
        except TelegramDeliveryError as exc:
            logger.warning(
                "Final telegram flush failed, %d bytes undelivered: %s",
                self.pending_bytes,
                exc,
            )

        if self._owns_session:
            self._session.close()


def _parse_response(body: bytes) -> TelegramResponse | None:
    if not body:
        return None
    try:
        return TelegramResponse.model_validate_json(body)
    except ValidationError:
        return None


def _describe_payload(payload: TelegramResponse) -> str:
    return f"error_code={payload.error_code} description={payload.description!r}"


def _describe_failure(response: Any) -> str:
    """Explain a non-200 response: parsed payload, raw body or headers."""
    body = response.content or b""
    if not body:
        return f"HTTP {response.status_code} {dict(response.headers)}"
    payload = _parse_response(body)
    if payload is not None:
        return f"HTTP {response.status_code} {_describe_payload(payload)}"
    return f"HTTP {response.status_code} {body.decode('utf-8', errors='replace')}"
