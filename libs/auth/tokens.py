from datetime import timedelta

from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import SessionClaims
from libs.common.config import get_settings
from libs.common.datetime_utils import utc_now

ALGORITHM = "HS256"


class InvalidToken(Exception):
    """Raised when a bearer token cannot be decoded or is expired."""


def issue_session_token(account_id: str, session_id: str, remember: bool = False) -> str:
    """Sign a token for an open session. ``remember`` extends its lifetime."""
    settings = get_settings()
    ttl = (
        timedelta(days=settings.REMEMBER_ME_TTL_DAYS)
        if remember
        else timedelta(minutes=settings.SESSION_TTL_MINUTES)
    )
    payload = {
        "sub": account_id,
        "sid": session_id,
        "exp": int((utc_now() + ttl).timestamp()),
    }
    return jwt.encode(payload, settings.SESSION_SECRET, algorithm=ALGORITHM)


def decode_session_token(token: str) -> SessionClaims:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SESSION_SECRET, algorithms=[ALGORITHM])
        return SessionClaims(**payload)
    except (JWTError, ValidationError) as e:
        raise InvalidToken(str(e)) from e
