"""Password hashing and session token utilities."""
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from fastapi import Response
from jose import JWTError, jwt

from finroute.config import settings
from finroute.models.user import SessionData


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password

    Returns:
        Hashed password string

    Example:
        >>> hashed = hash_password("mypassword123")
        >>> hashed.startswith("$2b$")
        True
    """
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against a hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Previously hashed password

    Returns:
        True if password matches hash, False otherwise
    """
    password_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def issue_session_token(
    uid: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed session token for a user.

    The payload is `{uid, iat, exp}`; expiry defaults to
    `settings.session_expiration_days`.

    Args:
        uid: User ID to encode in token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT string

    Example:
        >>> token = issue_session_token(uid="user123")
        >>> isinstance(token, str)
        True
    """
    now = datetime.utcnow()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.session_expiration_days)

    to_encode = {
        "uid": uid,
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: Optional[str]) -> Optional[SessionData]:
    """
    Verify and decode a session token.

    Forged, expired, malformed and missing tokens all return None, so
    callers cannot tell them apart from "no session".

    Example:
        >>> token = issue_session_token(uid="user123")
        >>> verify_session_token(token).uid
        'user123'
        >>> verify_session_token("invalid.token.here") is None
        True
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None

    uid = payload.get("uid")
    if not isinstance(uid, str) or not uid:
        return None

    return SessionData(uid=uid)


def set_session_cookie(response: Response, token: str) -> None:
    """Store the session token in the HTTP-only session cookie."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_session_cookie(response: Response) -> None:
    """
    Overwrite the session cookie with an immediately-expiring empty value.

    Tokens copied elsewhere stay valid until they expire.
    """
    response.set_cookie(
        key=settings.session_cookie_name,
        value="",
        max_age=0,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
