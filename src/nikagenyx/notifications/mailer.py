from __future__ import annotations

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, *, to: str, subject: str, body: str, sender_name: Optional[str] = None, reply_to: Optional[str] = None) -> None:
        raise NotImplementedError


class SmtpMailer(Mailer):
    """Plain-text mail over SMTP (implicit TLS on 465, STARTTLS otherwise)."""

    def __init__(self, smtp_config: dict):
        self._host = str(smtp_config.get("host", "localhost"))
        self._port = int(smtp_config.get("port", 465))
        self._use_ssl = bool(smtp_config.get("use_ssl", self._port == 465))
        self._user = smtp_config.get("user") or ""
        self._password = smtp_config.get("password") or ""
        self._sender_name = smtp_config.get("sender_name") or "Nikagenyx"
        self._timeout = int(smtp_config.get("timeout", 20))

    def send(self, *, to: str, subject: str, body: str, sender_name: Optional[str] = None, reply_to: Optional[str] = None) -> None:
        msg = EmailMessage()
        msg["From"] = formataddr((sender_name or self._sender_name, self._user))
        msg["To"] = to
        msg["Subject"] = subject
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(body)

        context = ssl.create_default_context()
        if self._use_ssl:
            server = smtplib.SMTP_SSL(self._host, self._port, timeout=self._timeout, context=context)
        else:
            server = smtplib.SMTP(self._host, self._port, timeout=self._timeout)
        with server:
            if not self._use_ssl:
                server.starttls(context=context)
            if self._user:
                server.login(self._user, self._password)
            server.send_message(msg)
        logger.debug(f"Mail '{subject}' sent to {to}")
