import unittest
from decimal import Decimal

from core.errors import ComputationError, ValidationError
from services.validation import (
    is_valid_gstin,
    normalize_gstin,
    require_party_name,
    require_reason,
    state_code_from_gstin,
    validate_line_items,
)


class TestValidateLineItems(unittest.TestCase):
    def test_blank_rows_dropped(self):
        lines = [
            {"description": "Steel Rod", "quantity": "10", "rate": "5"},
            {"description": "", "quantity": "", "rate": ""},
            {"description": "Bolt", "quantity": 0, "rate": 3},
            {"description": "  Nut  ", "quantity": 2, "rate": "1.50", "unit": "Kg"},
        ]
        valid = validate_line_items(lines)

        self.assertEqual([l["description"] for l in valid], ["Steel Rod", "Nut"])
        self.assertEqual(valid[0]["quantity"], Decimal("10"))
        self.assertEqual(valid[0]["unit"], "Pcs")
        self.assertEqual(valid[1]["rate"], Decimal("1.50"))
        self.assertEqual(valid[1]["unit"], "Kg")

    def test_rounded_to_stored_precision(self):
        valid = validate_line_items([
            {"description": "Washer", "quantity": "4", "rate": "0.125"},
            {"description": "Copper Wire", "quantity": "1.0005", "rate": "999.994"},
        ])
        self.assertEqual((valid[0]["quantity"], valid[0]["rate"]), (Decimal("4.000"), Decimal("0.13")))
        self.assertEqual((valid[1]["quantity"], valid[1]["rate"]), (Decimal("1.001"), Decimal("999.99")))

    def test_rounds_to_zero_is_blank(self):
        valid = validate_line_items([{"description": "Dust", "quantity": "0.0004", "rate": "10"}], require_any=False)
        self.assertEqual(valid, [])

    def test_no_valid_rows(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_line_items([{"description": "", "quantity": 1, "rate": 1}])
        self.assertEqual(ctx.exception.message, "Please add at least one item")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_empty_allowed_for_preview(self):
        self.assertEqual(validate_line_items([], require_any=False), [])

    def test_negative_or_nan_rejected(self):
        with self.assertRaises(ComputationError):
            validate_line_items([{"description": "X", "quantity": -1, "rate": 5}])
        with self.assertRaises(ComputationError):
            validate_line_items([{"description": "X", "quantity": 1, "rate": "NaN"}])
        with self.assertRaises(ComputationError):
            validate_line_items([{"description": "X", "quantity": "abc", "rate": 1}])


class TestRequiredFields(unittest.TestCase):
    def test_party_name(self):
        self.assertEqual(require_party_name("  Acme  "), "Acme")
        with self.assertRaises(ValidationError):
            require_party_name("   ")
        with self.assertRaises(ValidationError):
            require_party_name(None)

    def test_reason(self):
        self.assertEqual(require_reason("Goods returned"), "Goods returned")
        with self.assertRaises(ValidationError):
            require_reason("")
        with self.assertRaises(ValidationError) as ctx:
            require_reason("Changed my mind")
        self.assertIn("Other", ctx.exception.details["allowed"])


class TestGstin(unittest.TestCase):
    def test_valid(self):
        self.assertTrue(is_valid_gstin("27AAPFU0939F1ZV"))
        self.assertEqual(normalize_gstin(" 27aapfu0939f1zv "), "27AAPFU0939F1ZV")
        self.assertEqual(state_code_from_gstin("27AAPFU0939F1ZV"), "27")

    def test_invalid(self):
        self.assertFalse(is_valid_gstin("27AAPFU0939F1Z"))
        self.assertFalse(is_valid_gstin("27AAPFU0939F0ZV"))  # 13th char cannot be 0
        self.assertFalse(is_valid_gstin(None))
        with self.assertRaises(ValidationError):
            normalize_gstin("NOT-A-GSTIN")

    def test_empty_is_none(self):
        self.assertIsNone(normalize_gstin(""))
        self.assertIsNone(normalize_gstin(None))


if __name__ == "__main__":
    unittest.main()
