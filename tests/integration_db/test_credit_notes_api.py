import unittest

from models.credit_note import CreditNote
from tests.integration_db._db_case import DbTestCase


class TestCreditNotesAPI(DbTestCase):
    def _payload(self, **overrides):
        payload = {
            "credit_note_date": "2026-04-20",
            "party_name": "Bharat Steel",
            "party_gstin": "27AAPFU0939F1ZV",
            "party_state_code": "27",
            "reason": "Goods returned",
            "items": [{"description": "MS Flat 25x5", "quantity": "2", "rate": "50"}],
        }
        payload.update(overrides)
        return payload

    def test_create_inter_state_credit_note(self):
        r = self.client.post("/credit-notes", json=self._payload())
        self.assertEqual(r.status_code, 201, r.text)
        cn = r.json()["data"]

        self.assertEqual(cn["credit_note_number"], 1)
        self.assertEqual(cn["amount_before_tax"], 100.0)
        self.assertEqual(cn["igst_amount"], 18.0)
        self.assertIsNone(cn["cgst_amount"])
        self.assertEqual(cn["total_amount"], 118.0)
        self.assertEqual(cn["amount_in_words"], "One Hundred Eighteen Rupees Only")
        self.assertEqual(self.counters(), (1, 2))

    def test_party_state_missing_means_intra_state(self):
        cn = self.client.post(
            "/credit-notes", json=self._payload(party_gstin=None, party_state_code=None)
        ).json()["data"]
        self.assertEqual(cn["cgst_amount"], 9.0)
        self.assertEqual(cn["sgst_amount"], 9.0)

    def test_snapshot_from_original_invoice(self):
        inv = self.create_invoice(party_gstin="27AAPFU0939F1ZV", billed_to_state_code="27")
        cn = self.client.post(
            "/credit-notes",
            json=self._payload(original_invoice_id=inv["id"], party_name=None, party_gstin=None, party_state_code=None),
        ).json()["data"]
        self.assertEqual(cn["party_name"], "Acme Traders")
        self.assertEqual(cn["party_gstin"], "27AAPFU0939F1ZV")
        self.assertEqual(cn["party_state_code"], "27")

    def test_reason_required(self):
        r = self.client.post("/credit-notes", json=self._payload(reason=""))
        self.assertEqual(r.status_code, 400)

        r = self.client.post("/credit-notes", json=self._payload(reason="Because"))
        self.assertEqual(r.status_code, 400)
        self.assertIn("Goods returned", r.json()["details"]["allowed"])
        self.assertEqual(self.counters(), (1, 1))

    def test_duplicate_credit_note_number(self):
        self.client.post("/credit-notes", json=self._payload(credit_note_number=4))
        r = self.client.post("/credit-notes", json=self._payload(credit_note_number=4))
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "Credit Note #4 already exists. Please use a different number.")
        self.assertEqual(self.counters(), (1, 5))
        with self.SessionLocal() as db:
            self.assertEqual(db.query(CreditNote).count(), 1)

    def test_list_get_delete(self):
        cn = self.client.post("/credit-notes", json=self._payload()).json()["data"]
        self.assertEqual(len(self.client.get("/credit-notes").json()["data"]), 1)
        self.assertEqual(self.client.get(f"/credit-notes/{cn['id']}").json()["data"]["reason"], "Goods returned")
        self.assertEqual(self.client.delete(f"/credit-notes/{cn['id']}").status_code, 200)
        self.assertEqual(self.client.get(f"/credit-notes/{cn['id']}").status_code, 404)


if __name__ == "__main__":
    unittest.main()
