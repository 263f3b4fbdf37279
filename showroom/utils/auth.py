"""
Admin password checks.
The admin account has no username: a single bcrypt hash in ADMIN_PASSWORD_HASH.
"""
import bcrypt
from showroom.config import settings

BCRYPT_ROUNDS = 12


def hash_password(password: str) -> str:
    """Produce a value suitable for ADMIN_PASSWORD_HASH."""
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def verify_password(password: str, hashed_password: str) -> bool:
    """
    Check a password against a bcrypt hash in constant time.
    A malformed hash or an over-long password counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), hashed_password.encode('utf-8'))
    except (ValueError, TypeError):
        return False


def verify_admin_password(password: str) -> bool:
    """
    Raises:
        ValueError: If ADMIN_PASSWORD_HASH is not configured
    """
    admin_hash = settings.ADMIN_PASSWORD_HASH
    if not admin_hash:
        raise ValueError("ADMIN_PASSWORD_HASH not configured")
    return verify_password(password, admin_hash)
