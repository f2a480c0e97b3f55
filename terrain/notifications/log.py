import logging

from terrain.notifications.base import EmailSender

logger = logging.getLogger(__name__)


class LogEmailSender(EmailSender):
    """Writes messages to the log instead of delivering them."""

    def send(self, to: str, subject: str, html: str, tags: dict[str, str] | None = None) -> str | None:
        logger.info("Email (log backend): to=%s subject=%r tags=%s", to, subject, tags or {})
        logger.debug("Email body for %s:\n%s", to, html)
        return None
