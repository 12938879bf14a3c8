import hashlib
import hmac
import secrets


HASH_ALGORITHM = "sha256"


def hash_password(password: str, iterations: int) -> str:
    """Hash a password as ``iterations$salt$digest``."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        HASH_ALGORITHM, password.encode(), bytes.fromhex(salt), iterations
    )
    return f"{iterations}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    try:
        iterations, salt, expected = password_hash.split("$")
        digest = hashlib.pbkdf2_hmac(
            HASH_ALGORITHM, password.encode(), bytes.fromhex(salt), int(iterations)
        )
    except ValueError:
        return False
    return hmac.compare_digest(digest.hex(), expected)
