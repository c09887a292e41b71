"""Generators for unique signup credentials."""

from __future__ import annotations

import random
import string
import uuid
from datetime import datetime
from typing import Optional

from .models import UserAccount

DEFAULT_DOMAINS = ("example.com", "test.com", "storydoc-test.com", "mailinator.com")
DEFAULT_PREFIXES = ("test", "user", "qa", "auto", "storydoc")
MIN_PASSWORD_LENGTH = 8
_SPECIAL_CHARACTERS = "!@#$%^&*"


def generate_email(
    prefix: Optional[str] = None,
    domain: Optional[str] = None,
    *,
    use_uuid: bool = False,
) -> str:
    """Return an address that is unique per call."""

    prefix = prefix or random.choice(DEFAULT_PREFIXES)
    domain = domain or random.choice(DEFAULT_DOMAINS)
    if use_uuid:
        unique = uuid.uuid4().hex
    else:
        # Millisecond timestamps collide across threads; the suffix keeps them apart.
        unique = f"{datetime.now():%Y%m%d%H%M%S%f}{random.randrange(1000):03d}"
    return f"{prefix}.{unique}@{domain}"


def generate_password(length: int = 12) -> str:
    """Return a password with upper and lower case letters, a digit and a symbol."""

    if length < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Passwords must be at least {MIN_PASSWORD_LENGTH} characters long")
    rng = random.SystemRandom()
    required = [
        rng.choice(string.ascii_uppercase),
        rng.choice(string.ascii_lowercase),
        rng.choice(string.digits),
        rng.choice(_SPECIAL_CHARACTERS),
    ]
    pool = string.ascii_letters + string.digits + _SPECIAL_CHARACTERS
    characters = required + [rng.choice(pool) for _ in range(length - len(required))]
    rng.shuffle(characters)
    return "".join(characters)


def generate_account(*, terms_accepted: bool = True) -> UserAccount:
    return UserAccount(
        email=generate_email(),
        password=generate_password(),
        terms_accepted=terms_accepted,
    )
