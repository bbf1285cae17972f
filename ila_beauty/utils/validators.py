import re

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: str) -> str:
    email = (email or "").strip().lower()

    if not EMAIL_REGEX.match(email):
        raise ValueError("Invalid email address")

    return email


def name_key(name: str) -> str:
    return " ".join(name.split()).lower()
