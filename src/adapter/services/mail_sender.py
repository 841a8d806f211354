import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import List

from pydantic import BaseModel, ConfigDict

from src.app.services.mail_sender import IMailSender, MailDeliveryError, TransportStatus

logger = logging.getLogger(__name__)


class MailSettings(BaseModel):
    """SMTP transport settings, built once at startup."""

    model_config = ConfigDict(frozen=True)

    host: str = "smtp.gmail.com"
    port: int = 465
    secure: bool = True
    user: str = ""
    password: str = ""
    mail_from: str = ""
    sender_name: str = "Feedback Talent"
    timeout_seconds: float = 10

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password)

    @classmethod
    def from_config(cls, config) -> "MailSettings":
        return cls(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            secure=config.SMTP_SECURE,
            user=config.SMTP_USER or "",
            password=config.SMTP_PASS or "",
            mail_from=config.MAIL_FROM or config.SMTP_USER or "",
            sender_name=config.APP_NAME,
            timeout_seconds=config.SMTP_TIMEOUT_SECONDS,
        )


class SmtpMailSender(IMailSender):
    """SMTP implementation; blocking smtplib work runs in a worker thread"""

    def __init__(self, settings: MailSettings):
        self.settings = settings

    def _connect(self) -> smtplib.SMTP:
        s = self.settings
        if s.secure:
            server = smtplib.SMTP_SSL(s.host, s.port, timeout=s.timeout_seconds)
        else:
            server = smtplib.SMTP(s.host, s.port, timeout=s.timeout_seconds)
            server.starttls()
        server.login(s.user, s.password)
        return server

    def _send_sync(self, to: str, subject: str, body_html: str) -> None:
        msg = MIMEText(body_html, "html", "utf-8")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.settings.sender_name, self.settings.mail_from))
        msg["To"] = to

        with self._connect() as server:
            server.send_message(msg)

    def _verify_sync(self) -> None:
        with self._connect() as server:
            server.noop()

    async def _run(self, func, *args):
        # smtplib's own socket timeout covers each operation; wait_for bounds the whole exchange
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args), timeout=self.settings.timeout_seconds * 2
        )

    async def send(self, to: str, subject: str, body_html: str) -> None:
        try:
            await self._run(self._send_sync, to, subject, body_html)
        except (smtplib.SMTPException, OSError, asyncio.TimeoutError) as e:
            raise MailDeliveryError(f"SMTP delivery to {to} failed: {e!r}") from e
        logger.info(f"Mail sent to {to} via SMTP ({self.settings.host}:{self.settings.port})")

    async def verify(self) -> TransportStatus:
        try:
            await self._run(self._verify_sync)
        except (smtplib.SMTPException, OSError, asyncio.TimeoutError) as e:
            logger.warning(f"SMTP transport check failed: {e!r}")
            return TransportStatus(ok=False, error=str(e) or e.__class__.__name__)
        return TransportStatus(ok=True)


class OutgoingMail(BaseModel):
    to: str
    subject: str
    body_html: str


class OutboxMailSender(IMailSender):
    """
    Development sender used when SMTP credentials are not configured.

    Messages are kept in memory; only recipient and subject are logged.
    """

    def __init__(self):
        self.outbox: List[OutgoingMail] = []

    async def send(self, to: str, subject: str, body_html: str) -> None:
        self.outbox.append(OutgoingMail(to=to, subject=subject, body_html=body_html))
        logger.info(f"[mock mail] To: {to} Subject: {subject}")

    async def verify(self) -> TransportStatus:
        return TransportStatus(ok=False, error="SMTP credentials not configured (mock mode)")


def build_mail_sender(settings: MailSettings) -> IMailSender:
    if not settings.configured:
        logger.warning("SMTP_USER/SMTP_PASS not configured; outgoing mail kept in memory (mock mode)")
        return OutboxMailSender()
    return SmtpMailSender(settings)
