import unittest
from datetime import date, timedelta
from decimal import Decimal

from services.ledger import (
    PaymentStatus,
    build_aging,
    build_ledger,
    outstanding_by_party,
    party_summary,
    payment_status,
)

D = Decimal
TODAY = date(2026, 3, 31)


def _inv(id, number, total, invoice_date, due_date=None, party_id=1, name="Acme Traders"):
    return {
        "id": id,
        "invoice_number": number,
        "grand_total": D(total),
        "invoice_date": invoice_date,
        "due_date": due_date,
        "party_id": party_id,
        "billed_to_name": name,
    }


def _pay(id, invoice_id, amount, payment_date, mode="Cash", ref=None):
    return {
        "id": id,
        "invoice_id": invoice_id,
        "amount": D(amount),
        "payment_date": payment_date,
        "payment_mode": mode,
        "reference_number": ref,
    }


class TestBuildLedger(unittest.TestCase):
    def test_running_balance_and_final_balance(self):
        invoices = [
            _inv(1, 101, "1180.00", date(2026, 1, 5)),
            _inv(2, 102, "500.00", date(2026, 2, 1)),
        ]
        payments = [
            _pay(10, 1, "1000.00", date(2026, 1, 20), mode="UPI"),
            _pay(11, 2, "200.00", date(2026, 2, 10), ref="CHQ-551"),
        ]

        entries = build_ledger(invoices, payments)

        self.assertEqual([e.type for e in entries], ["invoice", "payment", "invoice", "payment"])
        self.assertEqual([e.balance for e in entries], [D("1180.00"), D("180.00"), D("680.00"), D("480.00")])
        self.assertEqual(entries[-1].balance, D("1680.00") - D("1200.00"))

    def test_references_and_descriptions(self):
        entries = build_ledger(
            [_inv(1, 7, "100", date(2026, 1, 1))],
            [_pay(5, 1, "40", date(2026, 1, 2), mode="UPI"), _pay(6, 1, "10", date(2026, 1, 3), ref="NEFT-9")],
        )
        self.assertEqual(entries[0].reference, "INV-7")
        self.assertEqual(entries[1].reference, "UPI")
        self.assertEqual(entries[1].description, "Payment for INV-7 (UPI)")
        self.assertEqual(entries[2].reference, "NEFT-9")

    def test_same_day_invoice_before_payment(self):
        day = date(2026, 1, 1)
        entries = build_ledger([_inv(1, 1, "100", day)], [_pay(2, 1, "100", day)])
        self.assertEqual([e.type for e in entries], ["invoice", "payment"])
        self.assertEqual(entries[0].balance, D("100.00"))
        self.assertEqual(entries[1].balance, D("0.00"))

    def test_accepts_iso_date_strings(self):
        entries = build_ledger([_inv(1, 1, "10", "2026-01-02")], [])
        self.assertEqual(entries[0].date, date(2026, 1, 2))

    def test_empty(self):
        self.assertEqual(build_ledger([], []), [])


class TestPaymentStatus(unittest.TestCase):
    def test_paid_wins_over_overdue(self):
        inv = _inv(1, 1, "100", date(2026, 1, 1), due_date=date(2026, 1, 15))
        self.assertEqual(payment_status(inv, D("100"), TODAY), PaymentStatus.PAID)

    def test_overdue(self):
        inv = _inv(1, 1, "100", date(2026, 1, 1), due_date=date(2026, 1, 15))
        self.assertEqual(payment_status(inv, D("40"), TODAY), PaymentStatus.OVERDUE)
        self.assertEqual(payment_status(inv, D("0"), TODAY), PaymentStatus.OVERDUE)

    def test_partial_and_unpaid(self):
        inv = _inv(1, 1, "100", date(2026, 3, 1), due_date=date(2026, 4, 30))
        self.assertEqual(payment_status(inv, D("40"), TODAY), PaymentStatus.PARTIAL)
        self.assertEqual(payment_status(inv, D("0"), TODAY), PaymentStatus.UNPAID)

    def test_due_today_is_not_overdue(self):
        inv = _inv(1, 1, "100", date(2026, 3, 1), due_date=TODAY)
        self.assertEqual(payment_status(inv, D("0"), TODAY), PaymentStatus.UNPAID)


class TestBuildAging(unittest.TestCase):
    def test_45_days_overdue_lands_in_31_60(self):
        inv = _inv(1, 1, "1000", TODAY - timedelta(days=60), due_date=TODAY - timedelta(days=45))
        report = build_aging([inv], [], TODAY)

        hits = [b.key for b in report.buckets if b.invoices]
        self.assertEqual(hits, ["days31_60"])
        self.assertEqual(report.bucket("days31_60").label, "31-60 Days")
        self.assertEqual(report.bucket("days31_60").invoices[0].days_overdue, 45)

    def test_bucket_edges(self):
        invoices = [
            _inv(1, 1, "10", TODAY),                               # 0 -> current
            _inv(2, 2, "10", TODAY - timedelta(days=30)),          # 30 -> 1-30
            _inv(3, 3, "10", TODAY - timedelta(days=31)),          # 31 -> 31-60
            _inv(4, 4, "10", TODAY - timedelta(days=90)),          # 90 -> 61-90
            _inv(5, 5, "10", TODAY - timedelta(days=91)),          # 91 -> 90+
            _inv(6, 6, "10", TODAY, due_date=TODAY + timedelta(days=10)),  # not yet due -> current
        ]
        report = build_aging(invoices, [], TODAY)
        by_key = {b.key: [a.invoice_id for a in b.invoices] for b in report.buckets}

        self.assertEqual(sorted(by_key["current"]), [1, 6])
        self.assertEqual(by_key["days1_30"], [2])
        self.assertEqual(by_key["days31_60"], [3])
        self.assertEqual(by_key["days61_90"], [4])
        self.assertEqual(by_key["days90plus"], [5])

    def test_totals_equal_outstanding_and_paid_invoices_skipped(self):
        invoices = [
            _inv(1, 1, "1000", date(2026, 1, 1)),
            _inv(2, 2, "500", date(2026, 2, 1)),
            _inv(3, 3, "300", date(2026, 3, 1)),
        ]
        payments = [_pay(1, 1, "400", date(2026, 1, 10)), _pay(2, 2, "500", date(2026, 2, 5))]

        report = build_aging(invoices, payments, TODAY)

        self.assertEqual(report.grand_total, D("900.00"))
        self.assertEqual(sum((b.total for b in report.buckets), D("0")), report.grand_total)
        all_ids = [a.invoice_id for b in report.buckets for a in b.invoices]
        self.assertNotIn(2, all_ids)

    def test_most_overdue_first_within_bucket(self):
        invoices = [
            _inv(1, 1, "10", TODAY - timedelta(days=35)),
            _inv(2, 2, "10", TODAY - timedelta(days=55)),
            _inv(3, 3, "10", TODAY - timedelta(days=40)),
        ]
        bucket = build_aging(invoices, [], TODAY).bucket("days31_60")
        self.assertEqual([a.invoice_id for a in bucket.invoices], [2, 3, 1])


class TestOutstandingByParty(unittest.TestCase):
    def test_groups_and_sorts_by_due(self):
        invoices = [
            _inv(1, 1, "1000", date(2026, 1, 1), party_id=1, name="Acme"),
            _inv(2, 2, "300", date(2026, 1, 2), party_id=2, name="Bharat Steel"),
            _inv(3, 3, "500", date(2026, 1, 3), party_id=2, name="Bharat Steel"),
            _inv(4, 4, "200", date(2026, 1, 4), party_id=3, name="Paid Up Co"),
            _inv(5, 5, "999", date(2026, 1, 5), party_id=None, name="Walk-in"),
        ]
        payments = [_pay(1, 1, "900", date(2026, 1, 5)), _pay(2, 4, "200", date(2026, 1, 6))]

        rows = outstanding_by_party(invoices, payments, party_names={2: "Bharat Steel Pvt Ltd"})

        self.assertEqual([r.party_id for r in rows], [2, 1])
        self.assertEqual(rows[0].name, "Bharat Steel Pvt Ltd")
        self.assertEqual(rows[0].due, D("800.00"))
        self.assertEqual(rows[0].invoice_count, 2)
        self.assertEqual(rows[1].name, "Acme")
        self.assertEqual(rows[1].due, D("100.00"))

    def test_party_summary(self):
        s = party_summary([_inv(1, 1, "100", date(2026, 1, 1))], [_pay(1, 1, "30", date(2026, 1, 2))])
        self.assertEqual(s, {
            "total_invoices": 1,
            "total_amount": D("100.00"),
            "total_paid": D("30.00"),
            "total_due": D("70.00"),
        })


if __name__ == "__main__":
    unittest.main()
