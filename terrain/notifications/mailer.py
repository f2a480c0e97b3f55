from __future__ import annotations

import logging

from jinja2 import Environment, PackageLoader, select_autoescape

from terrain.notifications.base import EmailSender
from terrain.notifications.factory import get_email_sender
from terrain.settings import settings

logger = logging.getLogger(__name__)

_env = Environment(
    loader=PackageLoader("terrain.notifications", "templates"),
    autoescape=select_autoescape(["html"]),
)


def render_team_invite(inviter_name: str, inviter_email: str) -> tuple[str, str]:
    """Return (subject, html) for a team invitation."""
    inviter = inviter_name or inviter_email or "Your colleague"
    subject = f"{inviter} invited you to Terrain"
    html = _env.get_template("team_invite.html").render(
        inviter=inviter,
        signup_url=f"{settings.app_url.rstrip('/')}/signup",
    )
    return subject, html


def send_team_invite(
    to_email: str,
    inviter_name: str,
    inviter_email: str,
    sender: EmailSender | None = None,
) -> None:
    """Send the invitation email. Never raises; failures are only logged."""
    try:
        subject, html = render_team_invite(inviter_name, inviter_email)
        (sender or get_email_sender()).send(to_email, subject, html, tags={"type": "team_invite"})
        logger.info("Team invite email dispatched: to=%s inviter=%s", to_email, inviter_email)
    except Exception:
        logger.exception("Team invite email failed: to=%s inviter=%s", to_email, inviter_email)
