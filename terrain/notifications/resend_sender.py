import logging

import resend

from terrain.notifications.base import EmailSender

logger = logging.getLogger(__name__)


class ResendEmailSender(EmailSender):
    def __init__(self, api_key: str, from_email: str) -> None:
        if not api_key:
            raise ValueError("Resend backend requires TERRAIN_RESEND_API_KEY")
        self.api_key = api_key
        self.from_email = from_email

    def send(self, to: str, subject: str, html: str, tags: dict[str, str] | None = None) -> str | None:
        resend.api_key = self.api_key
        params = {
            "from": self.from_email,
            "to": [to],
            "subject": subject,
            "html": html,
            "tags": [{"name": name, "value": value} for name, value in (tags or {}).items()],
        }
        response = resend.Emails.send(params)
        message_id = response.get("id") if response else None
        logger.info("Email sent: to=%s subject=%r id=%s", to, subject, message_id)
        return message_id
