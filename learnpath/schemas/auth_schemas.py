from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel


class AuthTokenPayload(BaseModel):
    sub: str
    email: Optional[str] = None
    exp: Optional[datetime] = None
    aud: Optional[Union[str, list[str]]] = None
    role: Optional[str] = None


class LearnerContext(BaseModel):
    """Who is acting. Passed explicitly to every store and session operation."""
    user_id: str
    email: Optional[str] = None
