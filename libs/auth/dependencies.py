from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from libs.auth.models import SessionClaims
from libs.auth.tokens import InvalidToken, decode_session_token

security = HTTPBearer(auto_error=False)


async def get_optional_claims(
    token: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> Optional[SessionClaims]:
    """
    Decode the bearer token if one was sent. Anonymous callers get None.
    """
    if token is None:
        return None
    try:
        return decode_session_token(token.credentials)
    except InvalidToken:
        return None

