from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.config import settings
from core.errors import BillingError
from core.logger import log
from core.logging import setup_logging
from db.session import engine
from models.base import Base

# Import all models to register them with SQLAlchemy BEFORE any queries
from models.company_settings import CompanySettings
from models.credit_note import CreditNote, CreditNoteItem
from models.invoice import Invoice, InvoiceItem, Payment
from models.party import Item, Party

from controllers.credit_notes import router as credit_notes_router
from controllers.dashboard import router as dashboard_router
from controllers.health import router as health_router
from controllers.invoices import router as invoices_router
from controllers.items import router as items_router
from controllers.parties import router as parties_router
from controllers.payments import router as payments_router
from controllers.reports import router as reports_router
from controllers.settings import router as settings_router
from controllers.tax import router as tax_router

from schemas.responses import ApiResponse


setup_logging()

app = FastAPI(title="GST Billing API")

# --- CORS middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Domain errors -> ApiResponse(error=...) ---
@app.exception_handler(BillingError)
async def billing_error_handler(request: Request, exc: BillingError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        log.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.error_code, exc.message)
    body = ApiResponse(error=exc.message, error_code=exc.error_code, details=exc.details or None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


# --- DB tables ---
Base.metadata.create_all(bind=engine)

# --- Routers ---
app.include_router(credit_notes_router)
app.include_router(dashboard_router)
app.include_router(health_router)
app.include_router(invoices_router)
app.include_router(items_router)
app.include_router(parties_router)
app.include_router(payments_router)
app.include_router(reports_router)
app.include_router(settings_router)
app.include_router(tax_router)

# --- Internal TTL cache store (in-memory) ---
# Controllers can use: from helpers import cache_get/cache_set/cache_clear_prefix
app.state.ttl_cache = {}  # dict[str, (expires_at, data)]
