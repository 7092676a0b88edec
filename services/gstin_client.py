import logging

import httpx

from core.config import settings
from core.constants import state_name
from core.errors import LookupServiceError, NotFoundError
from services.validation import normalize_gstin, state_code_from_gstin

logger = logging.getLogger(__name__)


def _join(*parts) -> str:
    return ", ".join(p.strip() for p in parts if p and str(p).strip())


def map_gstin_details(gstin: str, data: dict) -> dict:
    """gstincheck `data` block -> party fields. State always comes from the GSTIN."""
    addr = ((data.get("pradr") or {}).get("addr")) or {}
    state_code = state_code_from_gstin(gstin)
    return {
        "gstin": gstin,
        "trade_name": data.get("tradeNam") or data.get("lgnm"),
        "legal_name": data.get("lgnm"),
        "address": _join(
            addr.get("flno"),
            addr.get("bno"),
            addr.get("bnm"),
            addr.get("st"),
            addr.get("loc"),
            addr.get("city") or addr.get("dst"),
        ),
        "state_code": state_code,
        "state_name": state_name(state_code) or addr.get("stcd"),
        "pincode": addr.get("pncd"),
        "status": data.get("sts"),
        "registration_date": data.get("rgdt"),
        "business_type": data.get("ctb"),
        "dealer_type": data.get("dty"),
    }


class GstinClient:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base = settings.GSTINCHECK_BASE_URL.rstrip("/")
        self.api_key = settings.GSTINCHECK_API_KEY
        self.timeout = settings.GSTINCHECK_TIMEOUT_SECONDS
        self.transport = transport  # tests inject httpx.MockTransport

    async def lookup(self, gstin: str) -> dict:
        """
        Registered details for a GSTIN from gstincheck.co.in:
        GET {base}/check/{api_key}/{gstin}
        """
        gstin = normalize_gstin(gstin)
        if gstin is None:
            raise NotFoundError("GSTIN is required")

        if not self.api_key:
            raise LookupServiceError("GST lookup not configured", status_code=503)

        url = f"{self.base}/check/{self.api_key}/{gstin}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.get(url, headers={"Accept": "application/json"})
                r.raise_for_status()
                body = r.json()
        except httpx.HTTPError as e:
            logger.warning("GSTIN lookup failed for %s: %s", gstin, e)
            raise LookupServiceError("Failed to fetch GST details", details={"gstin": gstin}) from e
        except ValueError as e:
            logger.warning("GSTIN lookup returned invalid JSON for %s", gstin)
            raise LookupServiceError("Failed to fetch GST details", details={"gstin": gstin}) from e

        if not body.get("flag") or not body.get("data"):
            raise NotFoundError(body.get("message") or "GSTIN not found", details={"gstin": gstin})

        return map_gstin_details(gstin, body["data"])
