"""
Per-user CRUD over items (the starter template's sample resource).

Every lookup is scoped to the caller, so another user's item is a 404 rather
than a 403.
"""
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import get_current_user
from ..database import get_db
from ..models import ItemStatus
from ..schemas import (
    ApiResponse,
    BulkDelete,
    BulkResult,
    BulkStatusUpdate,
    ItemCreate,
    ItemOut,
    ItemPage,
    ItemStats,
    ItemUpdate,
)

router = APIRouter(prefix="/api/items", tags=["items"])


def _to_columns(data: dict) -> dict:
    if "metadata" in data:
        data["meta"] = data.pop("metadata") or {}
    return data


@router.get("", response_model=ItemPage)
def list_items(
    item_status: ItemStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=200),
    sort_by: Literal["createdAt", "updatedAt", "title"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0, le=1_000_000),
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    items, total = crud.list_items(
        db,
        user.id,
        status=item_status,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    return {
        "data": items,
        "pagination": {"total": total, "limit": limit, "offset": offset, "has_more": offset + limit < total},
    }


@router.post("", response_model=ApiResponse[ItemOut], status_code=status.HTTP_201_CREATED)
def create_item(payload: ItemCreate, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": crud.create_item(db, user.id, _to_columns(payload.model_dump()))}


@router.get("/stats", response_model=ApiResponse[ItemStats])
def item_stats(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": crud.count_items_by_status(db, user.id)}


@router.post("/bulk/status", response_model=ApiResponse[BulkResult])
def bulk_status(payload: BulkStatusUpdate, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": {"affected": crud.bulk_update_item_status(db, user.id, payload.ids, payload.status)}}


@router.post("/bulk/delete", response_model=ApiResponse[BulkResult])
def bulk_delete(payload: BulkDelete, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": {"affected": crud.bulk_delete_items(db, user.id, payload.ids)}}


@router.get("/{item_id}", response_model=ApiResponse[ItemOut])
def get_item(item_id: str, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    item = crud.get_item(db, item_id, user.id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return {"data": item}


@router.put("/{item_id}", response_model=ApiResponse[ItemOut])
def update_item(
    item_id: str,
    payload: ItemUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = crud.get_item(db, item_id, user.id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    data = _to_columns(payload.model_dump(exclude_unset=True))
    for key in ("title", "status"):
        if key in data and data[key] is None:
            del data[key]
    return {"data": crud.update_item(db, item, data)}


@router.delete("/{item_id}", response_model=ApiResponse[None])
def delete_item(item_id: str, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not crud.delete_item(db, item_id, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return {"message": "Item deleted"}
