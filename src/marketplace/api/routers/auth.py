"""
marketplace.api.routers.auth

Registration and login endpoints.

Responsibilities:
- Validate credential payloads.
- Delegate to `AuthService` and shape public responses (no digests).
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.status import HTTP_201_CREATED

from marketplace.api.deps import auth_service_dep
from marketplace.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


class RegisterRequest(BaseModel):
    username: str = Field(min_length=4, max_length=32)
    password: str = Field(min_length=8, max_length=64)


class UserResponse(BaseModel):
    id: int
    username: str
    created_at: datetime


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=32)
    password: str = Field(min_length=1, max_length=64)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/register", response_model=UserResponse, status_code=HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    auth: AuthService = Depends(auth_service_dep),
) -> UserResponse:
    user = await auth.register(username=body.username, password=body.password)
    return UserResponse(id=user.id, username=user.username, created_at=user.created_at)


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    auth: AuthService = Depends(auth_service_dep),
) -> LoginResponse:
    token = await auth.login(username=body.username, password=body.password)
    return LoginResponse(access_token=token)
