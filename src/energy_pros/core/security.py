"""Password hashing and signed session tokens."""
from __future__ import annotations

from datetime import timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from energy_pros.core.settings import settings
from energy_pros.db.time import utcnow

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Return a bcrypt hash of the plain-text password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if the password matches the stored hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_session_token(user_id: int, max_age_seconds: int | None = None) -> str:
    """Sign a session token whose subject is the user id."""
    lifetime = max_age_seconds if max_age_seconds is not None else settings.session_max_age_seconds
    expire = utcnow() + timedelta(seconds=lifetime)
    payload = {"sub": str(user_id), "exp": expire, "type": "session"}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> int | None:
    """Return the user id carried by a session token, or None if it is invalid."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if payload.get("type") != "session":
        return None
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return int(subject)
