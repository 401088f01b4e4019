import secrets
import string

# URL-safe alphabet, same character set nanoid uses
ALPHABET = string.ascii_letters + string.digits + "_-"
SHORT_ID_LENGTH = 8


def generate_short_id(length: int = SHORT_ID_LENGTH) -> str:
    """Generate a cryptographically random short id of fixed length."""
    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
