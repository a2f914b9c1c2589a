from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional, List

from app.config.permissions_config import AppRole


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    full_name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)
    confirm_password: Optional[str] = None

    @model_validator(mode="after")
    def check_passwords_match(self):
        self.full_name = self.full_name.strip()
        if not self.full_name:
            raise ValueError("full_name must not be blank")
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    provisioned: bool
    message: str


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    role: Optional[AppRole] = None
    can_edit: bool
    is_admin: bool
    permissions: List[str]
