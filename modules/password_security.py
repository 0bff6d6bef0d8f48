"""Password hashing and strength policy."""

from __future__ import annotations

import re
import secrets
import string
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from config import Config
from logging_config import get_logger
from models.results import PasswordValidationResult

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

UPPERCASE_PATTERN = re.compile(r"[A-Z]")
LOWERCASE_PATTERN = re.compile(r"[a-z]")
DIGIT_PATTERN = re.compile(r"[0-9]")
SPECIAL_CHAR_PATTERN = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

COMMON_PASSWORDS = frozenset({
    "password", "123456", "123456789", "qwerty", "abc123", "password123",
    "admin", "letmein", "welcome", "monkey", "1234567890", "password1",
    "123123", "dragon", "master", "hello", "freedom", "whatever", "qazwsx",
    "trustno1", "654321", "jordan23", "harley", "jordan",
})

# Score thresholds mapped to labels, highest first
STRENGTH_LEVELS = (
    (80, "Very Strong"),
    (60, "Strong"),
    (40, "Medium"),
    (20, "Weak"),
    (0, "Very Weak"),
)

SECURE_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*()_+-=[]{}|;:,.<>?"


def hash_password(plain_password: Optional[str], method: Optional[str] = None) -> Optional[str]:
    """
    Hash a password with a random salt.

    Two calls with the same password produce different hashes; both verify.

    Args:
        plain_password: Plain text password
        method: werkzeug hash method (default: Config.PASSWORD_HASH_METHOD)

    Returns:
        The hash string, or None for an empty password
    """
    if plain_password is None or not plain_password.strip():
        return None
    return generate_password_hash(plain_password, method=method or Config.PASSWORD_HASH_METHOD)


def verify_password(plain_password: Optional[str], password_hash: Optional[str]) -> bool:
    """Check a plain text password against a stored hash."""
    if plain_password is None or not password_hash:
        return False
    try:
        return check_password_hash(password_hash, plain_password)
    except (ValueError, TypeError) as e:
        # Unknown hash method or a corrupted record from users.txt
        logger.warning(f"Password verification failed on malformed hash: {e}")
        return False


def is_common_password(password: str) -> bool:
    return password.lower() in COMMON_PASSWORDS


def calculate_strength_score(password: str) -> int:
    """
    Score a password from 0 to 100.

    Up to 40 points for length beyond the minimum (2 per character) and 15
    points for each character class present.
    """
    score = 0
    if len(password) >= MIN_PASSWORD_LENGTH:
        score += min(40, (len(password) - MIN_PASSWORD_LENGTH) * 2)

    for pattern in (UPPERCASE_PATTERN, LOWERCASE_PATTERN, DIGIT_PATTERN, SPECIAL_CHAR_PATTERN):
        if pattern.search(password):
            score += 15

    return min(100, score)


def strength_label(score: int) -> str:
    for threshold, label in STRENGTH_LEVELS:
        if score >= threshold:
            return label
    return "Very Weak"


def validate_password_strength(password: Optional[str]) -> PasswordValidationResult:
    """
    Check a password against the policy.

    Every violated rule is reported; the score and label are filled in even
    for invalid passwords so the UI can show a strength meter.
    """
    result = PasswordValidationResult()

    if password is None:
        result.add_error("Password cannot be null")
        return result

    if len(password) < MIN_PASSWORD_LENGTH:
        result.add_error(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(password) > MAX_PASSWORD_LENGTH:
        result.add_error(f"Password must be no more than {MAX_PASSWORD_LENGTH} characters long")

    if is_common_password(password):
        result.add_error("Password is too common and easily guessable")

    if not UPPERCASE_PATTERN.search(password):
        result.add_error("Password must contain at least one uppercase letter")
    if not LOWERCASE_PATTERN.search(password):
        result.add_error("Password must contain at least one lowercase letter")
    if not DIGIT_PATTERN.search(password):
        result.add_error("Password must contain at least one digit")
    if not SPECIAL_CHAR_PATTERN.search(password):
        result.add_error("Password must contain at least one special character")

    result.strength_score = calculate_strength_score(password)
    result.strength_level = strength_label(result.strength_score)
    return result


def generate_secure_password(length: int = 16) -> str:
    """
    Generate a random password that satisfies the policy.

    Lengths below the minimum are raised to the minimum. Draws are repeated
    until every character class is present.
    """
    length = max(length, MIN_PASSWORD_LENGTH)
    while True:
        candidate = "".join(secrets.choice(SECURE_PASSWORD_ALPHABET) for _ in range(length))
        if validate_password_strength(candidate).is_valid:
            return candidate
