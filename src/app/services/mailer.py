"""
Outbound mail

IMailer is the transport; MailDispatcher sends in the background so that a
slow or failing transport never delays or fails the request that asked for
the mail.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Set

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class OutboundEmail(BaseModel):
    to: str
    subject: str
    text: str
    html: Optional[str] = None


class DeliveryResult(BaseModel):
    to: str
    delivered: bool
    error: Optional[str] = None


class IMailer(ABC):
    """Mail transport interface - application layer"""

    @abstractmethod
    async def send(self, email: OutboundEmail) -> None:
        """Deliver email; raise on failure"""
        pass


class MailDispatcher:
    """
    Fire-and-forget delivery with a time bound.

    dispatch() returns immediately with the background task. The task never
    raises: failures and timeouts are logged and reported as a DeliveryResult.
    """

    def __init__(self, mailer: IMailer, timeout_seconds: float = 60.0):
        self.mailer = mailer
        self.timeout_seconds = timeout_seconds
        self._pending: Set[asyncio.Task] = set()

    def dispatch(self, email: OutboundEmail) -> "asyncio.Task[DeliveryResult]":
        task = asyncio.create_task(self._deliver(email))
        # Hold a reference until done, the event loop only keeps weak ones
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(self, email: OutboundEmail) -> DeliveryResult:
        try:
            await asyncio.wait_for(self.mailer.send(email), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Timed out after {self.timeout_seconds}s sending mail to {email.to}")
            return DeliveryResult(to=email.to, delivered=False, error="timeout")
        except Exception as exc:
            logger.exception(f"Failed to send mail to {email.to}")
            return DeliveryResult(to=email.to, delivered=False, error=str(exc))

        logger.info(f"Mail sent to {email.to}: {email.subject}")
        return DeliveryResult(to=email.to, delivered=True)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def drain(self) -> List[DeliveryResult]:
        """Wait for every in-flight delivery (used on shutdown)"""
        if not self._pending:
            return []
        return list(await asyncio.gather(*self._pending))
