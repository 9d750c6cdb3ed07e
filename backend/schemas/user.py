from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

# Shared properties for user models
class UserBase(BaseModel):
    email: EmailStr

# Schema for user authentication credentials
class UserLogin(UserBase):
    password: str

# Schema for user registration requests (role is always "customer")
class UserCreate(UserBase):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6)

# Output schema for user profile details
class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Token plus the profile it was issued for
class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse

class MeResponse(BaseModel):
    message: str
    user: UserResponse
