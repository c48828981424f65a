"""
Password hashing.

Salted PBKDF2-HMAC-SHA256. Hashes are stored as
``pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>`` so the work
factor can be raised without invalidating existing accounts.

Password reset tokens are random hex strings; only their SHA-256
digest is stored.
"""

import hashlib
import hmac
import secrets

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 260_000
SALT_BYTES = 16


def hash_password(password: str, iterations: int = ITERATIONS) -> str:
    salt = secrets.token_bytes(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Return True when ``password`` matches the stored hash."""
    try:
        algorithm, iterations, salt_hex, digest_hex = encoded.split("$")
        rounds = int(iterations)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, rounds)
    return hmac.compare_digest(digest.hex(), digest_hex)


def new_session_token() -> str:
    """Opaque bearer token for a login session."""
    return secrets.token_urlsafe(32)


def new_reset_token() -> str:
    """Single-use token sent by email; only its hash is stored."""
    return secrets.token_hex(32)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
