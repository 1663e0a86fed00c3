"""Jury account management schemas."""

from pydantic import BaseModel, EmailStr, Field

from hackhub.modules.auth.schemas import StaffUserResponse


class JuryCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class JuryUpdate(BaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    is_active: bool | None = None


class JuryListResponse(BaseModel):
    jury_members: list[StaffUserResponse]
