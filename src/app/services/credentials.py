"""
Credential helpers

Password and PIN hashing (bcrypt), reset token generation and hashing
(SHA-256). Callers invoke these explicitly before persisting; entities never
hash anything on save.
"""

import hashlib
import secrets
from typing import Tuple

import bcrypt

PASSWORD_HASH_ROUNDS = 12
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(PASSWORD_HASH_ROUNDS)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def generate_pin(length: int) -> str:
    """Uniform numeric PIN from the OS CSPRNG, zero-padded to length"""
    return str(secrets.randbelow(10**length)).zfill(length)


def hash_pin(pin: str, rounds: int) -> str:
    return bcrypt.hashpw(pin.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def check_pin(pin: str, pin_hash: str) -> bool:
    return bcrypt.checkpw(pin.encode("utf-8"), pin_hash.encode("utf-8"))


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def generate_reset_token() -> Tuple[str, str]:
    """Returns (plain token for the client, SHA-256 hex digest for storage)"""
    token = secrets.token_urlsafe(32)
    return token, hash_reset_token(token)


def burn_hash_time(rounds: int) -> None:
    """Spend one bcrypt hash worth of time so unknown-account paths match known ones"""
    bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))


def fits_bcrypt(secret: str) -> bool:
    """bcrypt rejects inputs over 72 bytes"""
    return len((secret or "").encode("utf-8")) <= BCRYPT_MAX_BYTES


def is_well_formed_pin(candidate: str, length: int) -> bool:
    return len(candidate) == length and candidate.isascii() and candidate.isdigit()
