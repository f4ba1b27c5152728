"""Lookups of the services attached to ``app.state``."""
from __future__ import annotations

from fastapi import Request

from portal.services.record_service import PortalDataService
from portal.services.session_service import SessionService
from portal.services.signup_service import SignupService


def _state_attr(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} not configured")
    return value


def get_data_service(request: Request) -> PortalDataService:
    return _state_attr(request, "data_service")


def get_session_service(request: Request) -> SessionService:
    return _state_attr(request, "session_service")


def get_signup_service(request: Request) -> SignupService:
    return _state_attr(request, "signup_service")
