"""Pydantic schemas for tw_admin."""

from pydantic import BaseModel, Field


class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=128)


class AdminLoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class InvariantReport(BaseModel):
    ok: bool
    wars_checked: int
    violations: list[str]
