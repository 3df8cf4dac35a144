from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ....domain.models import Gender


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    email: EmailStr
    password: str
    date_of_birth: Optional[date] = Field(default=None, alias="dateOfBirth")
    gender: Optional[Gender] = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name is required")
        return value

    @field_validator("password")
    @classmethod
    def _password_length(cls, value: str) -> str:
        if len(value) < 6:
            raise ValueError("Please enter a password with 6 or more characters")
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def _gender_choice(cls, value):
        if value in (None, ""):
            return None
        if value not in {item.value for item in Gender}:
            raise ValueError("Gender must be Male, Female, or Other")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _password_required(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


class TokenResponse(BaseModel):
    token: str
