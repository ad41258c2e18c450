from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud, models
from ..auth import get_current_user
from ..database import get_db
from ..schemas import ApiKeyCreate, ApiKeyCreated, ApiKeyOut, ApiResponse

router = APIRouter(prefix="/api/keys", tags=["api-keys"])


@router.post("", response_model=ApiResponse[ApiKeyCreated], status_code=status.HTTP_201_CREATED)
def create_key(payload: ApiKeyCreate, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Create a key. The raw secret is in this response and nowhere else."""
    key, raw_key = crud.create_api_key(
        db, user.id, payload.name, scopes=list(payload.scopes), expires_in_days=payload.expires_in_days
    )
    created = ApiKeyCreated.model_validate({**ApiKeyOut.model_validate(key).model_dump(), "key": raw_key})
    return {"data": created}


@router.get("", response_model=ApiResponse[list[ApiKeyOut]])
def list_keys(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"data": crud.list_api_keys(db, user.id)}


@router.delete("/{key_id}", response_model=ApiResponse[None])
def revoke_key(key_id: str, user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not crud.deactivate_api_key(db, key_id, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API key not found")
    return {"message": "API key revoked"}
