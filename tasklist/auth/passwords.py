"""
Password hashing.

PBKDF2-HMAC-SHA256 with a per-password random salt and a fixed
iteration count. Stored format: ``pbkdf2_sha256$<iterations>$<salt>$<hash>``.
"""

from __future__ import annotations

import hashlib
import secrets


ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 100_000


def _derive(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations=iterations,
    ).hex()


def hash_password(password: str) -> str:
    """Hash a password for storage."""
    salt = secrets.token_hex(16)
    return f"{ALGORITHM}${ITERATIONS}${salt}${_derive(password, salt, ITERATIONS)}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its stored hash in constant time."""
    try:
        algorithm, iterations, salt, stored_hash = password_hash.split("$")
        if algorithm != ALGORITHM:
            return False
        candidate = _derive(password, salt, int(iterations))
    except (ValueError, AttributeError):
        return False
    return secrets.compare_digest(candidate, stored_hash)


# Verified against when the email is unknown, so a failed login costs the
# same whether or not the account exists.
DUMMY_HASH = hash_password(secrets.token_hex(16))
