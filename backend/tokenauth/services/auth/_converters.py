from __future__ import annotations


def coerce_user_id(subject: str) -> int | None:
    """Parse a token subject into a user id; ``None`` if it is not a positive integer."""
    # ASCII only: "²".isdigit() is True but int("²") raises
    if not (subject.isascii() and subject.isdecimal()):
        return None
    value = int(subject)
    return value if value > 0 else None
