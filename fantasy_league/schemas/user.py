from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class UserRegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=8, max_length=128)


class UserLoginRequest(BaseModel):
    email: str | None = None
    username: str | None = None
    password: str

    @model_validator(mode="after")
    def check_identifier(self):
        if not self.email and not self.username:
            raise ValueError("Either email or username is required")
        return self


class UserResponse(BaseModel):
    id: int
    email: str
    username: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    user: UserResponse
    message: str
