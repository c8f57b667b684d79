"""Authentication endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from api.deps.auth import bearer_scheme, get_auth_service, require_user
from api.deps.db import get_db
from auth import AuthService
from auth.schemas import LoginRequest, RefreshRequest, RegisterRequest, TokenPair, UserOut
from models import User


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _cookie_name(request: Request) -> str:
    return request.app.state.guard_settings.cookie_name


def _serialize_user(user: User) -> dict[str, Any]:
    return UserOut.model_validate(user).model_dump()


@router.post("/login")
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    user, access, refresh = service.login(db, payload.username, payload.password)
    response.set_cookie(_cookie_name(request), access, httponly=True, samesite="lax")
    return TokenPair(
        access_token=access,
        refresh_token=refresh,
        user=UserOut.model_validate(user),
        message="Successfully logged in",
    ).model_dump()


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    user, access, refresh = service.register(db, payload)
    response.set_cookie(_cookie_name(request), access, httponly=True, samesite="lax")
    return {
        "message": "User registered successfully",
        "user": _serialize_user(user),
        "accessToken": access,
        "refreshToken": refresh,
    }


@router.post("/refresh")
def refresh(
    payload: RefreshRequest,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    user, access, new_refresh = service.refresh(db, payload.refresh_token)
    return {
        "user": _serialize_user(user),
        "accessToken": access,
        "refreshToken": new_refresh,
        "message": "Token refreshed successfully",
    }


@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    service.logout(db, user)
    response.delete_cookie(_cookie_name(request))
    return {"message": "Successfully logged out"}


@router.get("/status")
def auth_status(
    request: Request,
    db: Session = Depends(get_db),
    service: AuthService = Depends(get_auth_service),
    credentials=Depends(bearer_scheme),
) -> dict[str, Any]:
    token = credentials.credentials if credentials else request.cookies.get(_cookie_name(request))
    user = service.resolve_user(db, token)
    db.commit()
    return {
        "authenticated": user is not None,
        "user": _serialize_user(user) if user else None,
    }
