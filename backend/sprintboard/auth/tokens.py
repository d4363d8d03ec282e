"""Password hashing and bearer tokens."""
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from sprintboard.config import get_settings


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def password_matches(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def issue_token(user_id: int) -> tuple[str, datetime]:
    """Signed access token for a user and its expiry time."""
    settings = get_settings()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    claims = {"sub": str(user_id), "exp": expires_at}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm), expires_at


def token_subject(token: str) -> int | None:
    """User id carried by a valid token, None for bad or expired tokens."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    subject = claims.get("sub")
    if subject is None or not str(subject).isdigit():
        return None
    return int(subject)
