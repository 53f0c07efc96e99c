from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from querypage.core.config import settings
from querypage.db.session import get_db
from querypage.models.task import Task
from querypage.schemas.paging import PageRequest
from querypage.services.page_augmenter import SchemaDescriptor
from querypage.services.page_fetch import fetch_page
from querypage.services.page_params import clamp_page_size, page_request_from_params

router = APIRouter()

TASK_SCHEMA = SchemaDescriptor.from_model(Task)


def _task_row(row: Task) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "status": row.status,
        "created_on": row.created_on.isoformat() if row.created_on else None,
    }


@router.get("/tasks/sortable-fields")
def list_sortable_fields():
    return {"fields": list(TASK_SCHEMA.names)}


@router.get("/tasks")
def list_tasks(
    page: Optional[int] = Query(default=None),
    size: Optional[int] = Query(default=None),
    sort: Optional[List[str]] = Query(default=None),
    db: Session = Depends(get_db),
):
    page_request = page_request_from_params(
        page,
        size,
        sort,
        default_size=settings.PAGE_DEFAULT_SIZE,
        max_size=settings.PAGE_MAX_SIZE,
    )
    result = fetch_page(TASK_SCHEMA, db.query(Task), page_request, serializer=_task_row)
    return result.model_dump(mode="json")


@router.post("/tasks/query")
def query_tasks(page_request: PageRequest, db: Session = Depends(get_db)):
    page_request = clamp_page_size(page_request, settings.PAGE_MAX_SIZE)
    result = fetch_page(TASK_SCHEMA, db.query(Task), page_request, serializer=_task_row)
    return result.model_dump(mode="json")
