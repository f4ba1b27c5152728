from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request

from portal.domain.records import default_password, suggest_email, KINDS
from portal.routers.deps import get_data_service
from portal.services.display_stats import display_stats
from portal.services.record_service import (
    DuplicateKeyError,
    NotFoundError,
    PersistenceError,
    RecordService,
    ValidationError,
)


def build_collection_router(key: str) -> APIRouter:
    """CRUD endpoints for one collection (``students`` or ``teachers``)."""
    kind = KINDS[key]
    router = APIRouter(prefix=f"/{key}", tags=[key])

    def _service(request: Request) -> RecordService:
        return get_data_service(request).service_for(key)

    @router.get("")
    def list_records(svc: RecordService = Depends(_service), stats: bool = False):
        records = svc.list()
        if stats:
            return [{**r, **display_stats(r["id"], i)} for i, r in enumerate(records)]
        return records

    @router.get("/search")
    def search_records(q: str = "", svc: RecordService = Depends(_service)):
        return svc.search(q)

    @router.get("/suggest")
    def suggest_credentials(id: str = "", name: str = ""):
        return {
            "email": suggest_email(id, name),
            "password": default_password(kind, id) if id else "",
        }

    @router.get("/{record_id}")
    def get_record(record_id: str, svc: RecordService = Depends(_service)):
        record = svc.get_by_id(record_id)
        if not record:
            raise HTTPException(404, f"{kind.label} with ID {record_id} not found")
        return record

    @router.get("/{record_id}/stats")
    def record_stats(record_id: str, svc: RecordService = Depends(_service)):
        if not svc.get_by_id(record_id):
            raise HTTPException(404, f"{kind.label} with ID {record_id} not found")
        return display_stats(record_id)

    @router.post("", status_code=201)
    def create_record(payload: dict[str, Any] = Body(...), svc: RecordService = Depends(_service)):
        try:
            record = svc.create(payload)
        except ValidationError as exc:
            raise HTTPException(400, exc.message)
        except DuplicateKeyError as exc:
            raise HTTPException(409, str(exc))
        except PersistenceError as exc:
            raise HTTPException(503, str(exc))
        return record

    @router.patch("/{record_id}")
    def update_record(record_id: str, payload: dict[str, Any] = Body(...), svc: RecordService = Depends(_service)):
        try:
            return svc.update(record_id, payload)
        except NotFoundError as exc:
            raise HTTPException(404, str(exc))
        except PersistenceError as exc:
            raise HTTPException(503, str(exc))

    @router.delete("/{record_id}")
    def delete_record(record_id: str, svc: RecordService = Depends(_service)):
        try:
            deleted = svc.delete(record_id)
        except PersistenceError as exc:
            raise HTTPException(503, str(exc))
        return {"deleted": deleted}

    return router


students_router = build_collection_router("students")
teachers_router = build_collection_router("teachers")
