"""
Password hashing and verification utilities.

Uses passlib's bcrypt for secure password storage. Digests written by the
old demo build (plain unsalted SHA-256 hex) still verify, and are flagged
for an upgrade so the next successful login replaces them.
"""
from __future__ import annotations

from passlib.context import CryptContext

from .config import settings

# Configure passlib context. Anything that is not the default scheme is
# treated as deprecated, so needs_update() reports it.
pwd_context = CryptContext(
    schemes=["bcrypt", "hex_sha256"],
    default=settings.PASSWORD_SCHEME,
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Return a hash for the given plain password using the default scheme."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """Verify a plain password against its hashed form."""
    if not hashed_password or pwd_context.identify(hashed_password) is None:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def password_needs_rehash(hashed_password: str) -> bool:
    """True when the digest uses a deprecated scheme or outdated rounds."""
    return pwd_context.needs_update(hashed_password)
