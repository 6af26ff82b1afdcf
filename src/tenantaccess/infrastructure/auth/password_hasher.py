"""Password hashing using Argon2id.

Plaintext passwords never reach storage; accounts keep only the hash
produced here.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Example:
        >>> hash_password("Str0ngPassword").startswith("$argon2id$")
        True
    """
    return _hasher.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Check a password against a stored hash in constant time.

    Returns False for a mismatch and for a hash that cannot be parsed.
    """
    try:
        return _hasher.verify(hashed, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Whether a hash was produced with outdated Argon2 parameters."""
    return _hasher.check_needs_rehash(hashed)
