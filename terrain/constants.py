import re

# Seats include the owner: owner + members + pending invitations.
SEAT_LIMIT = 5

TEAM_PLAN = "team"
MEMBER_ROLE = "member"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(raw: str | None) -> str:
    return (raw or "").strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None
