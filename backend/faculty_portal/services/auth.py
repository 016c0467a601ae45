"""
Password hashing with bcrypt.

bcrypt only reads the first 72 bytes of a secret. Longer passwords are refused
(schemas reject them with 400) rather than cut down, so two different passwords
can never share a hash.
"""
import bcrypt

MAX_PASSWORD_BYTES = 72


def password_fits(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """Salted one-way hash for storage. ValueError if the password is over 72 bytes."""
    if not password_fits(password):
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    # nothing over the limit was ever hashed
    if not password_fits(plain):
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
