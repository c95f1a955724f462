import re
from pydantic import BaseModel, EmailStr, Field, AfterValidator
from typing import Optional, Annotated

PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,32}$")


def check_password(value: str) -> str:
    if not PASSWORD_PATTERN.match(value):
        raise ValueError(
            "Password must be at least 8 characters with letters, numbers and special characters"
        )
    return value


def check_username(value: str) -> str:
    value = value.strip()
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username must be 3-32 letters, numbers, '.', '_' or '-'")
    return value


Username = Annotated[str, AfterValidator(check_username)]
Password = Annotated[str, AfterValidator(check_password)]


class UserCreate(BaseModel):
    username: Username
    email: EmailStr
    password: Password


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    username: Optional[Username] = None
    email: Optional[EmailStr] = None
    password: Optional[Password] = None
