"""
Password hashing helpers.

PBKDF2-HMAC with SHA-256 and a random 16-byte salt per password. Stored
form is ``<salt hex>$<hash hex>``.
"""

import hashlib
import hmac
import os

ITERATIONS = 100_000


def hash_password(password: str) -> str:
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password) -> bool:
    """Check a password against a stored ``salt$hash`` string.

    Anything that is not in the stored format (including legacy plaintext
    values) simply fails to verify.
    """
    if not isinstance(hashed_password, str) or "$" not in hashed_password:
        return False
    salt_hex, hash_hex = hashed_password.split("$", 1)
    try:
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
