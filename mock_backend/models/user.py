"""User models for the mock backend"""

from typing import Optional

from pydantic import BaseModel, Field


class User(BaseModel):
    """Registered customer"""
    id: str = Field(alias="_id")
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    gender: str = "not_specified"
    role: str = "customer"
    image: Optional[str] = None
    password_hash: str = Field(exclude=True)

    class Config:
        populate_by_name = True

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)


class LoginRequest(BaseModel):
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    email: str
    new_password: str = Field(alias="newPassword")

    class Config:
        populate_by_name = True
