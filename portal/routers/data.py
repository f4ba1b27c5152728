from __future__ import annotations

from dataclasses import asdict
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from portal.routers.deps import get_data_service
from portal.services.record_service import PersistenceError, PortalDataService, RecordImportError

router = APIRouter(prefix="/data", tags=["data"])


@router.get("/export")
def export_data(svc: PortalDataService = Depends(get_data_service)):
    return svc.export_all()


@router.post("/import")
def import_data(payload: Any = Body(...), svc: PortalDataService = Depends(get_data_service)):
    try:
        svc.import_all(payload)
    except RecordImportError as exc:
        raise HTTPException(400, str(exc))
    except PersistenceError as exc:
        raise HTTPException(503, str(exc))
    return {"students": svc.students.count(), "teachers": svc.teachers.count()}


@router.post("/reset")
def reset_data(svc: PortalDataService = Depends(get_data_service)):
    try:
        svc.reset_all()
    except PersistenceError as exc:
        raise HTTPException(503, str(exc))
    return {"students": svc.students.count(), "teachers": svc.teachers.count()}


@router.post("/flush")
def flush_data(svc: PortalDataService = Depends(get_data_service)):
    try:
        results = svc.flush_all()
    except PersistenceError as exc:
        raise HTTPException(503, str(exc))
    return {key: asdict(result) for key, result in results.items()}


@router.get("/status")
def storage_status(svc: PortalDataService = Depends(get_data_service)):
    """Diagnostic view: record counts and last-saved markers."""
    return {
        "students": {"count": svc.students.count(), "last_saved": svc.students.last_saved()},
        "teachers": {"count": svc.teachers.count(), "last_saved": svc.teachers.last_saved()},
    }
