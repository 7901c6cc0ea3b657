"""
Outgoing mail. Messages are logged instead of sent. The most recent ones are kept in
memory so tests can inspect them.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


@dataclass
class MailMessage:
    recipient: str
    subject: str
    body: str
    logged_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


OUTBOX_LIMIT = 100


class LoggingMailer:
    def __init__(self, outbox_limit: int = OUTBOX_LIMIT):
        self.outbox: deque[MailMessage] = deque(maxlen=outbox_limit)

    def send(self, recipient: str, subject: str, body: str) -> MailMessage:
        message = MailMessage(recipient=recipient, subject=subject, body=body)
        self.outbox.append(message)
        logger.info("Mail to %s: %s", recipient, subject)
        return message

    def clear(self) -> None:
        self.outbox.clear()


mailer = LoggingMailer()
