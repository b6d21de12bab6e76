import uuid
from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8, max_length=64)

class RegisterResponse(BaseModel):
    id: uuid.UUID
    email: EmailStr
    role: str
    is_verified: bool

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

class SendOtpRequest(BaseModel):
    email: EmailStr
    name: str | None = None

class VerifyOtpRequest(BaseModel):
    email: EmailStr
    otp: str = Field(..., min_length=4, max_length=10)
