from typing import Optional

from fastapi import HTTPException, status
from jose import JWTError
from jose.jwt import decode, encode

from learnpath.config import get_settings
from learnpath.schemas.auth_schemas import AuthTokenPayload
from learnpath.utils.logger import get_logger

logger = get_logger("auth")


def create_access_token(data: AuthTokenPayload) -> str:
    """Sign a token the way the auth provider does. Used for local development and tests."""
    settings = get_settings()
    return encode(data.model_dump(exclude_none=True), settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: Optional[str]) -> AuthTokenPayload:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    settings = get_settings()
    try:
        payload = decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": settings.JWT_AUDIENCE is not None},
        )
        return AuthTokenPayload(**payload)
    except JWTError as e:
        logger.warning("token rejected: %s", e)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
