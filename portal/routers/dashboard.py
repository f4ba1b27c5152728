from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from portal.routers.deps import get_session_service
from portal.services.session_service import SessionService, TrustedRedirectDisabledError

router = APIRouter(tags=["dashboard"])


@router.get("/{record_id}/dashboard")
def dashboard_bootstrap(record_id: str, request: Request, svc: SessionService = Depends(get_session_service)):
    """Trusted deep link: resolve ``record_id`` to a session without credentials."""
    try:
        user = svc.bootstrap_from_path(request.url.path, current=svc.current_user())
    except TrustedRedirectDisabledError as exc:
        raise HTTPException(403, str(exc))
    if not user:
        raise HTTPException(404, f"No student or teacher with ID {record_id}")
    return {"user": user.to_dict(), "redirect": user.dashboard_path}
