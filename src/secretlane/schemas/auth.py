"""Pydantic schemas for signup, login and session responses."""

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    message: str
    user_id: int
    username: str


class IdentityRead(BaseModel):
    user_id: int
    username: str


class MessageResponse(BaseModel):
    message: str
