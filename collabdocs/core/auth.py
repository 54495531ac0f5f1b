from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from collabdocs.core.errors import Unauthorized
from collabdocs.core.security import principal_from_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """Resolve the caller's principal id from the bearer token, or reject."""
    if credentials is None:
        raise Unauthorized()

    user_id = principal_from_token(credentials.credentials)
    if user_id is None:
        raise Unauthorized("could not validate credentials")

    return user_id
