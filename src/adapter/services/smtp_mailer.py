import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from src.app.services.mailer import IMailer, OutboundEmail

logger = logging.getLogger(__name__)


class SmtpMailer(IMailer):
    """SMTP transport; the blocking smtplib session runs in a worker thread"""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        secure: bool = False,
        timeout_seconds: float = 30.0,
        sender_name: str = "AI Career Assistant",
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.secure = secure
        self.timeout_seconds = timeout_seconds
        self.sender_name = sender_name

    async def send(self, email: OutboundEmail) -> None:
        await asyncio.to_thread(self._send_sync, self._build_message(email))

    def _build_message(self, email: OutboundEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = email.subject
        msg["From"] = formataddr((self.sender_name, self.username))
        msg["To"] = email.to
        msg.set_content(email.text)
        if email.html:
            msg.add_alternative(email.html, subtype="html")
        return msg

    def _send_sync(self, msg: EmailMessage) -> None:
        logger.info(f"Sending mail via {self.host}:{self.port}")
        if self.secure or self.port == 465:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout_seconds) as server:
                server.login(self.username, self.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)


class LogOnlyMailer(IMailer):
    """Used when SMTP is not configured: the mail is logged instead of sent"""

    async def send(self, email: OutboundEmail) -> None:
        logger.warning(
            "SMTP not configured (SMTP_HOST, SMTP_USER, SMTP_PASS); "
            f"mail to {email.to} not sent. Body:\n{email.text}"
        )
