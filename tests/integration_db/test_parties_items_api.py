import unittest
from unittest.mock import patch

from core.config import settings
from tests.integration_db._db_case import DbTestCase


class TestPartiesAPI(DbTestCase):
    def test_crud(self):
        r = self.client.post("/parties", json={"name": "Acme Traders", "gstin": "07aaacr5055k1z5", "payment_terms": "Net 15"})
        self.assertEqual(r.status_code, 201, r.text)
        party = r.json()["data"]
        self.assertEqual(party["gstin"], "07AAACR5055K1Z5")
        self.assertEqual(party["state_code"], "07")
        self.assertEqual(party["state"], "Delhi")

        rows = self.client.get("/parties?search=acme").json()["data"]
        self.assertEqual([p["id"] for p in rows], [party["id"]])

        r = self.client.put(f"/parties/{party['id']}", json={"phone": "9810000000"})
        self.assertEqual(r.json()["data"]["phone"], "9810000000")

        self.assertEqual(self.client.delete(f"/parties/{party['id']}").status_code, 200)
        self.assertEqual(self.client.get(f"/parties/{party['id']}").status_code, 404)

    def test_invalid_gstin(self):
        r = self.client.post("/parties", json={"name": "X", "gstin": "12345"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["error"], "Invalid GSTIN format")

    def test_deleted_party_keeps_invoice_snapshot(self):
        party = self.client.post("/parties", json={"name": "Acme Traders", "state_code": "07"}).json()["data"]
        inv = self.create_invoice(party_id=party["id"], billed_to_name=None)
        self.client.delete(f"/parties/{party['id']}")

        got = self.client.get(f"/invoices/{inv['id']}").json()["data"]
        self.assertEqual(got["billed_to_name"], "Acme Traders")

    def test_gstin_lookup_not_configured(self):
        with patch.object(settings, "GSTINCHECK_API_KEY", None):
            r = self.client.get("/parties/gstin/27AAPFU0939F1ZV")
        self.assertEqual(r.status_code, 503)
        self.assertEqual(r.json()["error"], "GST lookup not configured")


class TestItemsAPI(DbTestCase):
    def test_crud_and_unique_name(self):
        r = self.client.post("/items", json={"name": "Cement Bag", "hsn_code": "2523", "default_unit": "Bag", "gst_rate": "28"})
        self.assertEqual(r.status_code, 201, r.text)
        item = r.json()["data"]
        self.assertEqual(item["gst_rate"], 28.0)

        r = self.client.post("/items", json={"name": "cement bag"})
        self.assertEqual(r.status_code, 400)

        r = self.client.put(f"/items/{item['id']}", json={"default_rate": "350"})
        self.assertEqual(r.json()["data"]["default_rate"], 350.0)

        self.assertEqual(len(self.client.get("/items?search=cem").json()["data"]), 1)
        self.assertEqual(self.client.delete(f"/items/{item['id']}").status_code, 200)
        self.assertEqual(self.client.get(f"/items/{item['id']}").status_code, 404)

    def test_unknown_item_on_invoice(self):
        r = self.client.post("/invoices", json=self.invoice_payload(items=[
            {"item_id": 999, "description": "Ghost", "quantity": "1", "rate": "1"},
        ]))
        self.assertEqual(r.status_code, 404)


if __name__ == "__main__":
    unittest.main()
