from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from portal.routers.deps import get_session_service, get_signup_service
from portal.services.session_service import InvalidCredentialsError, SessionService
from portal.services.signup_service import RegistrationError, SignupService

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    user_type: str
    identifier: str
    password: str
    remember: bool = False


def _public_account(account: dict) -> dict:
    return {k: v for k, v in account.items() if k != "password"}


@router.post("/login")
def login(body: LoginRequest, svc: SessionService = Depends(get_session_service)):
    try:
        user = svc.login(body.user_type, body.identifier, body.password, remember=body.remember)
    except InvalidCredentialsError as exc:
        raise HTTPException(401, str(exc))
    return {"user": user.to_dict(), "redirect": user.dashboard_path}


@router.post("/logout")
def logout(svc: SessionService = Depends(get_session_service)):
    svc.logout()
    return {"ok": True}


@router.get("/me")
def me(svc: SessionService = Depends(get_session_service)):
    user = svc.current_user()
    return {"user": user.to_dict() if user else None}


@router.post("/signup", status_code=201)
def signup(payload: dict[str, Any] = Body(...), svc: SignupService = Depends(get_signup_service)):
    try:
        account = svc.register(payload)
    except RegistrationError as exc:
        raise HTTPException(400, exc.errors)
    return {
        "account": _public_account(account),
        "message": f"Account created successfully for {account['fullName']}! You can now log in.",
    }
