"""In-memory accounts and session tokens. Reset when the server restarts."""

import hashlib
import hmac
import logging
import secrets
import threading
from dataclasses import dataclass

from game.errors import InvalidCredentials, UsernameTaken

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 100_000


@dataclass(frozen=True)
class Account:
    username: str
    salt: bytes
    password_hash: bytes


# username -> Account
_accounts: dict[str, Account] = {}
# session token -> username
_sessions: dict[str, str] = {}
_lock = threading.Lock()


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)


def _new_session(username: str) -> str:
    token = secrets.token_urlsafe(32)
    _sessions[token] = username
    return token


def signup(username: str, password: str) -> str:
    """Create an account and return a session token for it."""
    salt = secrets.token_bytes(16)
    password_hash = _hash_password(password, salt)
    with _lock:
        if username in _accounts:
            raise UsernameTaken()
        _accounts[username] = Account(username=username, salt=salt, password_hash=password_hash)
        token = _new_session(username)
    logger.info("Account created: %s", username)
    return token


def login(username: str, password: str) -> str:
    """Check credentials and return a fresh session token."""
    with _lock:
        account = _accounts.get(username)
    if account is None or not hmac.compare_digest(
        account.password_hash, _hash_password(password, account.salt)
    ):
        raise InvalidCredentials()
    with _lock:
        token = _new_session(username)
    logger.info("Login: %s", username)
    return token


def logout(token: str) -> None:
    with _lock:
        _sessions.pop(token, None)


def username_for(token: str) -> str | None:
    """Return the username a session token belongs to, or None."""
    with _lock:
        return _sessions.get(token)


def clear() -> None:
    """Drop every account and session."""
    with _lock:
        _accounts.clear()
        _sessions.clear()
