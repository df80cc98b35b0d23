from typing import Optional

from fastapi import Cookie, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from learnpath.schemas.auth_schemas import LearnerContext
from learnpath.utils.jwt import verify_token

bearer = HTTPBearer(auto_error=False)


def get_current_learner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    access_token: Optional[str] = Cookie(None),
) -> LearnerContext:
    """Resolve the learner from a bearer token, falling back to the access_token cookie."""
    token = credentials.credentials if credentials else access_token
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
        )
    payload = verify_token(token)
    if not payload.sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
    return LearnerContext(user_id=payload.sub, email=payload.email)
