from pydantic import BaseModel, EmailStr
from datetime import datetime
from typing import Optional
from jurnext.models.user import UserRole


class UserUpsert(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    photo: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str]
    photo: Optional[str]
    role: UserRole
    fraud: bool
    created_at: Optional[datetime]
    last_logged_in: Optional[datetime]

    class Config:
        from_attributes = True


class RoleUpdate(BaseModel):
    id: Optional[int] = None
    role: UserRole


class RoleResponse(BaseModel):
    role: UserRole
