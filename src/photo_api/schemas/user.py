"""Pydantic schemas for users."""

from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserPublic(BaseModel):
    """What other parts of the API may see of a user — never the password."""
    id: int
    username: str
    email: str

    model_config = {"from_attributes": True}
