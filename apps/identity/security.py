"""Password hashing for user credentials."""
from django.contrib.auth.hashers import check_password, make_password


def hash_password(raw_password: str) -> str:
    """Return a salted one-way hash using the configured PASSWORD_HASHERS."""
    return make_password(raw_password)


def verify_password(raw_password: str, password_hash: str) -> bool:
    if not raw_password or not password_hash:
        return False
    return check_password(raw_password, password_hash)
