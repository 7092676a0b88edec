import os
import tempfile
import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app import app
from db.session import get_db
from models.base import Base
from models.company_settings import COMPANY_SETTINGS_ID, CompanySettings

COMPANY_GSTIN = "07AAACR5055K1Z5"


class DbTestCase(unittest.TestCase):
    """
    Fresh sqlite file per test, wired into the app through get_db,
    with the company registered in Delhi (07) and both counters at 1.
    """

    def setUp(self):
        self._tmp = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
        self._tmp.close()

        self.engine = create_engine(
            f"sqlite:///{self._tmp.name}",
            connect_args={"check_same_thread": False},
            future=True,
        )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, future=True)
        Base.metadata.create_all(bind=self.engine)

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.state.ttl_cache = {}
        self.client = TestClient(app)

        with self.SessionLocal() as db:
            db.add(
                CompanySettings(
                    id=COMPANY_SETTINGS_ID,
                    company_name="Rathi Steel Traders",
                    gstin=COMPANY_GSTIN,
                    state="Delhi",
                    state_code="07",
                    next_invoice_number=1,
                    next_credit_note_number=1,
                    default_gst_rate=18,
                )
            )
            db.commit()

    def tearDown(self):
        self.client.close()
        app.dependency_overrides.clear()
        try:
            self.engine.dispose()
        finally:
            if os.path.exists(self._tmp.name):
                os.unlink(self._tmp.name)

    # ---------------------------------------------------------
    # helpers
    # ---------------------------------------------------------
    def counters(self) -> tuple[int, int]:
        with self.SessionLocal() as db:
            row = db.get(CompanySettings, COMPANY_SETTINGS_ID)
            return row.next_invoice_number, row.next_credit_note_number

    def invoice_payload(self, **overrides) -> dict:
        payload = {
            "invoice_date": "2026-04-10",
            "billed_to_name": "Acme Traders",
            "billed_to_state_code": "07",
            "packaging_charges": "10",
            "items": [
                {"description": "MS Flat 25x5", "quantity": "10", "rate": "5", "unit": "Kg"},
                {"description": "GI Wire", "quantity": "2", "rate": "50"},
                {"description": "Binding Wire", "quantity": "1", "rate": "25"},
            ],
        }
        payload.update(overrides)
        return payload

    def create_invoice(self, **overrides) -> dict:
        r = self.client.post("/invoices", json=self.invoice_payload(**overrides))
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()["data"]
