"""
Verification code generation and secret hashing.

Codes come from the ``secrets`` module, so every one of the 10^6
six-digit values is equally likely and unpredictable. Codes and
passwords are both stored as bcrypt hashes.
"""

import secrets

import bcrypt

CODE_LENGTH = 6

# bcrypt only considers the first 72 bytes of its input
_BCRYPT_MAX_BYTES = 72


def generate_code() -> str:
    """
    Generate a cryptographically secure 6-digit verification code.

    Returns string to preserve leading zeros ("000000" to "999999").
    """
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


def hash_secret(value: str, rounds: int = 10) -> str:
    """Hash a code or password using bcrypt with the given cost factor."""
    return bcrypt.hashpw(_encode(value), bcrypt.gensalt(rounds=rounds)).decode()


def verify_secret(value: str, hashed: str) -> bool:
    """
    Compare a plaintext value against a bcrypt hash in constant time.

    Returns False for empty or malformed hashes instead of raising.
    """
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_encode(value), hashed.encode())
    except ValueError:
        return False


def _encode(value: str) -> bytes:
    return value.encode("utf-8")[:_BCRYPT_MAX_BYTES]
