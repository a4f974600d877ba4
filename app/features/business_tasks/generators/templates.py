"""
Copy and deep links for generated tasks.

Kept apart from the score rules so wording can change without touching
priorities.
"""

import math
from datetime import date, datetime


def format_money(cents: int) -> str:
    return f"${cents / 100:.0f}"


def format_day(value: datetime | date) -> str:
    """e.g. 'Tue, 14 Jan'."""
    return f"{value:%a}, {value.day} {value:%b}"


def format_short_date(value: datetime | date) -> str:
    """e.g. '14 Jan'."""
    return f"{value.day} {value:%b}"


def format_time(value: datetime) -> str:
    """e.g. '2:30 pm'."""
    hour = value.hour % 12 or 12
    suffix = "am" if value.hour < 12 else "pm"
    return f"{hour}:{value.minute:02d} {suffix}"


def age_label(hours: float) -> str:
    if hours < 1:
        return "Just now"
    if hours < 24:
        return f"{math.floor(hours)}h ago"
    return f"{math.floor(hours / 24)}d ago"


def plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


# ---------------------------------------------------------------------------
# Deep links
# ---------------------------------------------------------------------------


def consultation_link(consultation_id: str) -> str:
    return f"/conversations?consultationId={consultation_id}"


def conversation_link(conversation_id: str | None) -> str:
    return f"/conversations/{conversation_id}"


def client_link(client_id: str | None) -> str:
    return f"/clients/{client_id}"


# ---------------------------------------------------------------------------
# Message bodies
# ---------------------------------------------------------------------------


def confirmation_message(client_name: str | None, start_time: datetime) -> str:
    return (
        f"Hi {client_name or 'there'}! Just confirming your appointment "
        f"on {format_day(start_time)} at {format_time(start_time)}. See you then! 🎨"
    )


def birthday_message(client_name: str) -> str:
    return (
        f"Happy Birthday {client_name}! 🎂 Hope you have an amazing day! "
        "If you're thinking about your next piece, I'd love to create something special for you."
    )


def birthday_subject(client_name: str) -> str:
    return f"Happy Birthday {client_name}! 🎂"


def anniversary_message(client_name: str, years: int, piece: str) -> str:
    return (
        f"Hey {client_name}! 🎨 It's been {plural(years, 'year')} since we did your {piece}! "
        "Hope it's still looking great. Would love to see how it's healed - "
        "and if you're thinking about your next piece, let me know!"
    )


def anniversary_subject(years: int) -> str:
    return f"{years} Year Tattoo Anniversary! 🎨"


def healed_photo_message(client_name: str, piece: str) -> str:
    return (
        f"Hey {client_name}! 📸 Your {piece} should be nicely healed by now. "
        "Would love to see how it turned out! If you get a chance, send me a pic - "
        "I'd love to add it to my portfolio (with your permission of course!)."
    )


def thank_you_message(client_name: str, piece: str) -> str:
    return (
        f"Thanks so much {client_name}! 🙏 It was great working on your {piece} today. "
        "Take good care of it during healing - let me know if you have any questions!"
    )
