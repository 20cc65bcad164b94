"""Password hashing with bcrypt."""

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with bcrypt.

    Args:
        password: Plain text password (at most 72 bytes when UTF-8 encoded)
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash string
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against a bcrypt hash in constant time.

    Args:
        password: Plain text password
        password_hash: bcrypt hash

    Returns:
        True if the password matches, False otherwise (including malformed hashes)
    """
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash
        return False
