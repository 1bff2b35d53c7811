from pydantic import BaseModel, EmailStr
from typing import Literal, Optional


UserType = Literal["trainer", "student"]


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    user_type: Optional[str] = None


class RegisterRequest(BaseModel):
    name: str
    email: EmailStr
    password: str
    phone: Optional[str] = None
    user_type: UserType = "student"


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    user_type: str
    message: str


class ResetPasswordRequest(BaseModel):
    email: EmailStr
