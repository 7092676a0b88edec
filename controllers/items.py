from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.errors import NotFoundError, ValidationError
from db.session import get_db
from queries import parties as q
from schemas.item import ItemIn, ItemOut, ItemUpdate
from schemas.responses import ApiResponse

router = APIRouter(prefix="/items", tags=["items"])


def _get_or_404(db: Session, item_id: int):
    row = q.get_item(db, item_id)
    if row is None:
        raise NotFoundError(f"Item {item_id} not found")
    return row


def _ensure_unique_name(db: Session, name: str, item_id: int | None = None) -> None:
    existing = q.find_item_by_name(db, name)
    if existing is not None and existing.id != item_id:
        raise ValidationError(f"Item '{name}' already exists")


@router.get("", response_model=ApiResponse[list[ItemOut]])
def get_items(
    search: str | None = Query(None),
    limit: int = Query(500, ge=1, le=500),
    db: Session = Depends(get_db),
):
    return ApiResponse(data=[ItemOut.model_validate(i) for i in q.list_items(db, search=search, limit=limit)])


@router.post("", status_code=201, response_model=ApiResponse[ItemOut])
def create_item(payload: ItemIn, db: Session = Depends(get_db)):
    values = payload.model_dump()
    values["name"] = values["name"].strip()
    _ensure_unique_name(db, values["name"])
    return ApiResponse(data=ItemOut.model_validate(q.create_item(db, values)))


@router.get("/{item_id}", response_model=ApiResponse[ItemOut])
def get_item(item_id: int, db: Session = Depends(get_db)):
    return ApiResponse(data=ItemOut.model_validate(_get_or_404(db, item_id)))


@router.put("/{item_id}", response_model=ApiResponse[ItemOut])
def update_item(item_id: int, payload: ItemUpdate, db: Session = Depends(get_db)):
    row = _get_or_404(db, item_id)
    values = payload.model_dump(exclude_unset=True)
    if values.get("name"):
        values["name"] = values["name"].strip()
        _ensure_unique_name(db, values["name"], item_id)
    return ApiResponse(data=ItemOut.model_validate(q.update_item(db, row, values)))


@router.delete("/{item_id}", response_model=ApiResponse[dict])
def delete_item(item_id: int, db: Session = Depends(get_db)):
    q.delete_item(db, _get_or_404(db, item_id))
    return ApiResponse(data={"deleted": item_id})
