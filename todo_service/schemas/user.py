import uuid
from datetime import datetime
from typing import Set
from pydantic import BaseModel, EmailStr, Field


class UserRegistrationRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)


class UserLoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: uuid.UUID
    username: str
    email: str
    roles: Set[str]
    created_at: datetime
    enabled: bool

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str
    token_type: str = "Bearer"
    user_id: uuid.UUID
    username: str


class AvailabilityResponse(BaseModel):
    available: bool
