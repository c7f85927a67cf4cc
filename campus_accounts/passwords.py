"""Password digests.

Digests are a single unsalted SHA-256 pass, base64 encoded, so that they
match the credentials already stored for existing accounts. Flows take the
hash function as a parameter; swap in a salted key derivation function there
when the stored credentials are migrated.
"""

from typing import Callable
from base64 import b64encode
import hashlib

PasswordHasher = Callable[[str], str]


def hash_password(password: str) -> str:
    """Generate the stored digest of a password."""
    hashed = hashlib.sha256(password.encode('utf-8')).digest()
    return b64encode(hashed).decode('ascii')
