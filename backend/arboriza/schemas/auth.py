"""
Arboriza Backend - Auth Schemas
================================

What:  Request and response models for registration and login.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Body of POST /api/auth/register and POST /api/auth/login."""
    username: Optional[str] = Field(default=None, description="Login name (case-insensitive)")
    password: Optional[str] = Field(default=None, description="Password, compared exactly")


class UserPublic(BaseModel):
    """What the API exposes about a user. Never includes the password."""
    id: int
    username: str

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    success: bool = True
    user: UserPublic


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    user: UserPublic
