"""Small formatting helpers for rendering users and roles."""

from datetime import datetime
from typing import Literal

from admin_sync.schemas.user import User

DateStyle = Literal["short", "long", "numeric"]

# strftime patterns per style; day is rendered without zero padding.
DATE_FORMATS: dict[str, str] = {
    "short": "%b {day}, %Y",
    "long": "%B {day}, %Y",
    "numeric": "%m/%d/%Y",
}


def get_initials(text: str) -> str:
    """First letter of each space-separated word, uppercased ("Jane Doe" -> "JD")."""
    return "".join(word[0].upper() for word in (text or "").split(" ") if word)


def display_name(user: User) -> str:
    return f"{user.first} {user.last}".strip()


def format_date(value: datetime | None, style: DateStyle = "short") -> str:
    """Render a timestamp for a table column; empty string when missing."""
    if value is None:
        return ""
    pattern = DATE_FORMATS.get(style, DATE_FORMATS["short"])
    return value.strftime(pattern.replace("{day}", str(value.day)))
