import os
import tempfile
from pathlib import Path

from dotenv import load_dotenv


# ---------------------------------------------------------
# Load .env from project root (same folder as app.py)
# ---------------------------------------------------------
ROOT = Path(__file__).resolve().parents[1]  # project root
load_dotenv(ROOT / ".env", override=False)

# ---------------------------------------------------------
# The app creates its tables at import time; point it at a throwaway
# sqlite file unless the caller chose a database explicitly.
# Integration tests override get_db with their own file per test.
# ---------------------------------------------------------
if not os.getenv("DATABASE_URL"):
    _db_file = Path(tempfile.gettempdir()) / "gst_billing_test.db"
    os.environ["DATABASE_URL"] = f"sqlite:///{_db_file}"

# Deterministic tax defaults (Delhi, 18%) and no real GSTIN lookups.
os.environ.setdefault("COMPANY_STATE_CODE", "07")
os.environ.setdefault("DEFAULT_GST_RATE", "18")
os.environ["GSTINCHECK_API_KEY"] = ""
