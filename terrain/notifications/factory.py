import logging

from terrain.notifications.base import EmailSender
from terrain.settings import settings

logger = logging.getLogger(__name__)


def get_email_sender() -> EmailSender:
    backend = settings.email_backend

    if backend == "log":
        from terrain.notifications.log import LogEmailSender

        logger.debug("Using email backend: log")
        return LogEmailSender()

    if backend == "resend":
        from terrain.notifications.resend_sender import ResendEmailSender

        logger.debug("Using email backend: resend from=%s", settings.email_from)
        return ResendEmailSender(api_key=settings.resend_api_key, from_email=settings.email_from)

    raise ValueError(f"Unsupported email backend: {backend}")
