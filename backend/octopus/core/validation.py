"""Input Validation - regexes shared by registration, invites and search."""

import re

VALID_EMAIL = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9]"
    r"(?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)
VALID_USERNAME = re.compile(r"^[A-Za-z0-9_]{3,20}$")


def is_valid_email(email: str) -> bool:
    return bool(VALID_EMAIL.match(email))


def is_valid_username(username: str) -> bool:
    return bool(VALID_USERNAME.match(username))
