"""Identity schemas returned by the auth endpoints."""

from typing import Optional

from pydantic import BaseModel

from .content import EntityId


class User(BaseModel):
    id: Optional[EntityId] = None
    username: str
    email: Optional[str] = None


class AuthResult(BaseModel):
    token: str
    user: User
