"""Password strength rating and generation."""

import re
import secrets
import string

from nexushub.models.constants import (
    GENERATED_PASSWORD_LENGTH,
    MEDIUM_PASSWORD_MAX_LENGTH,
    WEAK_PASSWORD_MAX_LENGTH,
)
from nexushub.models.password import PasswordStrength

PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*()_+"


def check_strength(password: str) -> PasswordStrength:
    """Rate a password.

    - Shorter than 8 characters: Weak
    - 8 to 11 characters: Medium
    - 12 or more with an uppercase letter, a digit and a symbol: Strong
    - Anything else: Medium
    """
    if len(password) <= WEAK_PASSWORD_MAX_LENGTH:
        return PasswordStrength.WEAK
    if len(password) <= MEDIUM_PASSWORD_MAX_LENGTH:
        return PasswordStrength.MEDIUM
    if (
        re.search(r"[A-Z]", password)
        and re.search(r"[0-9]", password)
        and re.search(r"[^A-Za-z0-9]", password)
    ):
        return PasswordStrength.STRONG
    return PasswordStrength.MEDIUM


def generate_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    """Generate a random password from letters, digits and symbols."""
    if length < 1:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))
