# cargoplan/schemas/users.py

# Auth, User, Actor

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from cargoplan.models.users import UserRole

# --- AUTH ---
class LoginRequest(BaseModel):
    username: str
    password: str

class LoginResponse(BaseModel):
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"
    user_id: int
    username: str
    role: str
    city: Optional[str] = None

# --- USER ---
class UserOut(BaseModel):
    id: int
    username: str
    role: UserRole
    city: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)

class Actor(BaseModel):
    """Caller identity handed to the services once authentication is done."""
    id: int
    role: UserRole
    city: Optional[str] = None
    username: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_agent(self) -> bool:
        return self.role == UserRole.AGENT
