"""
storefront/schemas/user.py - Signup and login payloads.

Passwords are never stored here: Firebase Authentication keeps the salted hash.
"""
from pydantic import BaseModel, EmailStr, Field


class SignupRequest(BaseModel):
    email: EmailStr


class SignupResponse(BaseModel):
    user_id: str
    email: EmailStr
    message: str = "Password sent by e-mail"


class UserCredentials(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginResponse(BaseModel):
    id_token: str
    refresh_token: str
    expires_in: int
    user_id: str
