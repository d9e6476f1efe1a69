from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequestDTO(BaseModel):
    # Length rules live in the use case so each field gets its own message.
    name: str | None = Field(default=None)
    telephone: str = ""
    password: str = ""

    model_config = ConfigDict(extra="ignore")


class LoginRequestDTO(BaseModel):
    telephone: str = ""
    password: str = ""

    model_config = ConfigDict(extra="ignore")


class TokenDTO(BaseModel):
    token: str


class UserProfileDTO(BaseModel):
    id: int
    name: str
    telephone: str

    model_config = ConfigDict(from_attributes=True)


class UserInfoDTO(BaseModel):
    user: UserProfileDTO
