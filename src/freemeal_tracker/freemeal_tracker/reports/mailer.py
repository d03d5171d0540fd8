from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Protocol, Sequence

from ..app_logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Attachment:
    filename: str
    content: bytes
    mime_type: str = "text/csv"


class Mailer(Protocol):
    def send(self, *, to: Sequence[str], subject: str, html: str, attachments: Sequence[Attachment] = ()) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int = 587
    user: str = ""
    password: str = ""
    use_ssl: bool = False
    timeout: int = 30

    @classmethod
    def from_dict(cls, d: dict) -> "SmtpConfig":
        port = int(d.get("port") or 587)
        return cls(
            host=d.get("host") or "localhost",
            port=port,
            user=d.get("user") or "",
            password=d.get("password") or "",
            # Port 465 is implicit TLS, everything else upgrades with STARTTLS
            use_ssl=bool(d.get("use_ssl", port == 465)),
            timeout=int(d.get("timeout") or 30),
        )


class SmtpMailer(Mailer):
    def __init__(self, config: SmtpConfig, *, from_name: str, from_email: str):
        self._config = config
        self._sender = formataddr((from_name, from_email))

    def build_message(self, *, to: Sequence[str], subject: str, html: str, attachments: Sequence[Attachment] = ()) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._sender
        msg["To"] = ", ".join(to)
        msg["Subject"] = subject
        msg.set_content("This message contains an HTML body and a CSV attachment.")
        msg.add_alternative(html, subtype="html")
        for a in attachments:
            maintype, _, subtype = a.mime_type.partition("/")
            msg.add_attachment(a.content, maintype=maintype, subtype=subtype, filename=a.filename)
        return msg

    def send(self, *, to: Sequence[str], subject: str, html: str, attachments: Sequence[Attachment] = ()) -> None:
        msg = self.build_message(to=to, subject=subject, html=html, attachments=attachments)
        cfg = self._config

        if cfg.use_ssl:
            smtp = smtplib.SMTP_SSL(cfg.host, cfg.port, timeout=cfg.timeout)
        else:
            smtp = smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)
        with smtp:
            if not cfg.use_ssl:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
            if cfg.user:
                smtp.login(cfg.user, cfg.password)
            smtp.send_message(msg)

        logger.info("sent %r to %d recipient(s) via %s:%s", subject, len(to), cfg.host, cfg.port)
