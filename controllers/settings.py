from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.constants import state_name
from db.session import get_db
from queries.company_settings import get_company_settings, update_company_settings
from schemas.responses import ApiResponse
from schemas.settings import CompanySettingsOut, CompanySettingsUpdate
from services.validation import normalize_gstin

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=ApiResponse[CompanySettingsOut])
def get_settings(db: Session = Depends(get_db)):
    return ApiResponse(data=CompanySettingsOut.model_validate(get_company_settings(db)))


@router.put("", response_model=ApiResponse[CompanySettingsOut])
def put_settings(payload: CompanySettingsUpdate, db: Session = Depends(get_db)):
    """
    Company profile and document counters. Lowering a counter is allowed
    here (manual correction); issuing documents only ever moves it up.
    """
    values = payload.model_dump(exclude_unset=True)
    if "gstin" in values:
        values["gstin"] = normalize_gstin(values["gstin"])
    if values.get("state_code") and not values.get("state"):
        values["state"] = state_name(values["state_code"])
    return ApiResponse(data=CompanySettingsOut.model_validate(update_company_settings(db, values)))
