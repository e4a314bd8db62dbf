from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

PLANS = ("free", "pro", "ultimate")


class UserCreate(BaseModel):
    """Registration payload. Presence is checked by the service, not here."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    plan: Optional[str] = None


class UserCreated(BaseModel):
    message: str = "user created"
    id: str


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserSummary(BaseModel):
    """User as returned alongside a login token."""
    id: str
    name: str
    email: str
    plan: str
    freeRequestsUsed: int = 0


class LoginResponse(BaseModel):
    token: str
    user: UserSummary


class User(BaseModel):
    """Stored user without the password hash."""
    id: str = Field(alias="_id")
    name: str
    email: str
    plan: str = "free"
    freeRequestsUsed: int = 0
    createdAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
