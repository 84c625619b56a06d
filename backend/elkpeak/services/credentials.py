"""
Admin credential hashing and verification.

Two stored formats are accepted:
- bcrypt ("$2a$/$2b$/$2y$..."), used for newly provisioned credentials;
- PBKDF2-SHA256 as "iterations$salt_b64$hash_b64" for rows provisioned by the
  previous tooling.
"""

import base64
import hashlib
import hmac
import logging
import os
from dataclasses import dataclass
from typing import Optional

import bcrypt
from sqlalchemy.orm import Session

from elkpeak.models.credential import AdminCredential

logger = logging.getLogger("elk.auth")

PBKDF2_ITERATIONS = 100000
PBKDF2_SALT_BYTES = 16
PBKDF2_HASH_BYTES = 32


@dataclass(frozen=True)
class AuthResult:
    valid: bool
    is_admin: bool = False
    name: Optional[str] = None


def hash_password_bcrypt(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def hash_password_pbkdf2(password: str, iterations: int = PBKDF2_ITERATIONS, salt: Optional[bytes] = None) -> str:
    salt = salt if salt is not None else os.urandom(PBKDF2_SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations, dklen=PBKDF2_HASH_BYTES)
    return f"{iterations}${base64.b64encode(salt).decode('ascii')}${base64.b64encode(digest).decode('ascii')}"


def _check_pbkdf2(password: str, stored: str) -> bool:
    parts = stored.split("$")
    if len(parts) != 3:
        return False
    iterations_s, salt_b64, hash_b64 = parts
    try:
        iterations = int(iterations_s)
        salt = base64.b64decode(salt_b64, validate=True)
        expected = base64.b64decode(hash_b64, validate=True)
    except ValueError:
        return False
    if iterations <= 0 or not expected:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations, dklen=len(expected))
    return hmac.compare_digest(digest, expected)


def check_password(password: str, stored_hash: Optional[str]) -> bool:
    """Compare a plaintext password with one stored hash. Malformed hashes never match."""
    if not stored_hash:
        return False
    if stored_hash.startswith("$2"):
        try:
            return bcrypt.checkpw(password.encode("utf-8"), stored_hash.encode("utf-8"))
        except ValueError:
            return False
    return _check_pbkdf2(password, stored_hash)


def verify_password(db: Session, password: str) -> AuthResult:
    """
    Check `password` against every stored credential.

    Succeeds on the first row that matches and carries the admin flag; a match
    on a non-admin row does not stop the scan. The failure result is the same
    whatever the reason, so callers cannot tell how close a guess was.
    """
    rows = db.query(AdminCredential).all()
    for row in rows:
        if not row.is_admin:
            # still hashed so timing does not reveal which rows are admin
            check_password(password, row.password_hash)
            continue
        if check_password(password, row.password_hash):
            logger.info("admin_auth_ok credential=%s", row.id)
            return AuthResult(valid=True, is_admin=True, name=row.name)
    logger.warning("admin_auth_failed")
    return AuthResult(valid=False)
