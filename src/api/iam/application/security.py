"""Password hashing for principals.

Uses bcrypt with per-hash salts. Hashes stored by earlier deployments use
the same format, so existing accounts keep working.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72

# A valid hash checked when the email is unknown, so both login failures take
# the same time.
_DUMMY_HASH = bcrypt.hashpw(b"unknown-principal", bcrypt.gensalt()).decode()


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: The plaintext password to hash

    Returns:
        The bcrypt hash as a string
    """
    return bcrypt.hashpw(
        password.encode()[:BCRYPT_MAX_BYTES], bcrypt.gensalt()
    ).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against its hash using constant-time comparison.

    A missing hash is checked against a dummy hash and always fails.

    Args:
        password: The plaintext password to verify
        password_hash: The bcrypt hash to verify against

    Returns:
        True if the password matches the hash, False otherwise
    """
    candidate = password.encode()[:BCRYPT_MAX_BYTES]
    if password_hash is None:
        bcrypt.checkpw(candidate, _DUMMY_HASH.encode())
        return False
    try:
        return bcrypt.checkpw(candidate, password_hash.encode())
    except ValueError:
        # Malformed hash in storage
        return False
