from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class MailDeliveryError(Exception):
    """The transport did not accept the message (refused, unreachable, timed out)"""


class TransportStatus(BaseModel):
    ok: bool
    error: Optional[str] = None


class IMailSender(ABC):
    """Outgoing mail interface - application layer"""

    @abstractmethod
    async def send(self, to: str, subject: str, body_html: str) -> None:
        """Deliver one message; raises MailDeliveryError on failure"""
        pass

    @abstractmethod
    async def verify(self) -> TransportStatus:
        """Check that the transport is configured and reachable"""
        pass
