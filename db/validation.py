from __future__ import annotations

import re


EMAIL_PATTERN = r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$"
_EMAIL_RE = re.compile(EMAIL_PATTERN)


class InvalidEmailError(ValueError):
    pass


def validate_student_email(email: str | None) -> str | None:
    """
    Student email rule, checked on every insert and every update.

    Null emails are always accepted. Anything else must be a local part and a
    domain joined by `@`, where the domain ends in a dot and a top-level segment
    of at least two letters.
    """
    if email is not None and not _EMAIL_RE.fullmatch(email):
        raise InvalidEmailError("Invalid email format")
    return email
