from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    id: str
    username: str
    email: Optional[str] = None
    avatar: Optional[str] = None
    github_id: Optional[int] = None
    # Kept server-side only; stripped from every response model.
    access_token: Optional[str] = Field(default=None, exclude=True)
    created_at: datetime


class SimpleAuthRequest(BaseModel):
    username: str = ""


class SimpleAuthResponse(BaseModel):
    user: User
