from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from functools import lru_cache

from passlib.context import CryptContext

from checkin.core.settings import settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

_SESSION_TOKEN_BYTES = 32


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


@dataclass(frozen=True)
class AdminCredentials:
    """The single shared administrator login, hashed once per process."""

    username: str
    password_hash: str

    def check(self, username: str | None, password: str | None) -> bool:
        """Return True only when both username and password match.

        The password hash is verified even when the username is wrong so the
        two failure modes cost the same.
        """
        user_ok = hmac.compare_digest((username or "").encode(), self.username.encode())
        try:
            password_ok = verify_password(password or "", self.password_hash)
        except ValueError:
            # bcrypt rejects some inputs (NUL bytes) before hashing; still pay for one verify.
            verify_password("", self.password_hash)
            password_ok = False
        return user_ok and password_ok


def build_admin_credentials(username: str, password: str) -> AdminCredentials:
    return AdminCredentials(username=username, password_hash=get_password_hash(password))


@lru_cache(maxsize=1)
def get_admin_credentials() -> AdminCredentials:
    return build_admin_credentials(settings.admin_user, settings.admin_pass)


# ── Admin session tokens ────────────────────────────────────────────────


def generate_session_token() -> str:
    return secrets.token_urlsafe(_SESSION_TOKEN_BYTES)


def hash_session_token(token: str) -> str:
    """SHA-256 of the cookie value; raw tokens are never stored."""
    return hashlib.sha256(token.encode()).hexdigest()
