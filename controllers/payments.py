from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from db.session import get_db
from helpers import invalidate_dashboard
from schemas.responses import ApiResponse
from services import documents

router = APIRouter(prefix="/payments", tags=["payments"])


@router.delete("/{payment_id}", response_model=ApiResponse[dict])
def delete_payment(payment_id: int, request: Request, db: Session = Depends(get_db)):
    documents.delete_payment(db, payment_id)
    invalidate_dashboard(request.app.state)
    return ApiResponse(data={"deleted": payment_id})
