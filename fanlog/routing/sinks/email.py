"""Email sink — relays each record as a plain-text message over SMTP.

One message is sent per ``write`` call, synchronously, so a slow relay
slows down every logger the sink is subscribed on.
"""

from __future__ import annotations

import logging
import smtplib
import threading
from email.message import EmailMessage
from typing import Callable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class EmailConfigError(ValueError):
    """Raised when an email sink cannot be built from its settings."""


class SmtpSettings(BaseModel):
    """Connection details for the SMTP relay."""

    model_config = ConfigDict(frozen=True)

    host: str = "localhost"
    port: int = 587
    user: str = ""
    password: str = ""
    sender: str = ""
    starttls: bool = True
    timeout: float = 10.0


class EmailSink:
    """Sends every record to *address* through an SMTP relay.

    Parameters
    ----------
    address:
        The recipient address.
    smtp:
        Relay settings.
    subject:
        Subject line of every message.
    smtp_factory:
        Builds the SMTP client; called as ``smtp_factory(host, port,
        timeout=...)``.  Defaults to ``smtplib.SMTP``.

    Raises
    ------
    EmailConfigError
        If *address* or *smtp* is missing, or the relay cannot be reached.
    """

    def __init__(
        self,
        address: str,
        smtp: SmtpSettings | None,
        *,
        subject: str = "Logger",
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
    ) -> None:
        if not address:
            raise EmailConfigError("Empty email address.")
        if smtp is None:
            raise EmailConfigError("Empty smtp client.")

        self._address = address
        self._smtp = smtp
        self._subject = subject
        self._smtp_factory = smtp_factory
        self._lock = threading.Lock()

        try:
            with self._connect():
                pass
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailConfigError(f"Failed create email provider: {exc}") from exc

    @property
    def sink_id(self) -> str:
        return "email"

    @property
    def address(self) -> str:
        return self._address

    def write(self, data: bytes) -> int:
        """Send *data* as the body of one message.

        SMTP failures propagate to the caller.
        """
        if not data:
            return 0

        message = EmailMessage()
        message["From"] = self._smtp.sender or self._smtp.user
        message["To"] = self._address
        message["Subject"] = self._subject
        message.set_content(data.decode("utf-8", errors="replace"))

        with self._lock, self._connect() as client:
            client.send_message(message)
        logger.debug("EmailSink: sent %d bytes to %s", len(data), self._address)
        return len(data)

    def _connect(self) -> smtplib.SMTP:
        client = self._smtp_factory(
            self._smtp.host, self._smtp.port, timeout=self._smtp.timeout
        )
        try:
            if self._smtp.starttls:
                client.starttls()
            if self._smtp.user:
                client.login(self._smtp.user, self._smtp.password)
        except BaseException:
            client.close()
            raise
        return client
