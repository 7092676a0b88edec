import unittest
from decimal import Decimal

from services.amount_words import format_indian_currency, words_for


class TestWordsFor(unittest.TestCase):
    def test_zero(self):
        self.assertEqual(words_for(Decimal("0")), "Zero Rupees Only")

    def test_one_lakh(self):
        self.assertEqual(words_for(Decimal("100000")), "One Lakh Rupees Only")

    def test_lakh_thousand_hundred_and_paise(self):
        self.assertEqual(
            words_for(Decimal("1234567.89")),
            "Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven Rupees and Eighty Nine Paise Only",
        )

    def test_paise_only(self):
        self.assertEqual(words_for(Decimal("0.50")), "Fifty Paise Only")

    def test_teens_and_exact_hundreds(self):
        self.assertEqual(words_for(Decimal("15")), "Fifteen Rupees Only")
        self.assertEqual(words_for(Decimal("700")), "Seven Hundred Rupees Only")
        self.assertEqual(words_for(Decimal("218.30")), "Two Hundred Eighteen Rupees and Thirty Paise Only")

    def test_crore(self):
        self.assertEqual(words_for(Decimal("10000000")), "One Crore Rupees Only")
        self.assertEqual(
            words_for(Decimal("25050005")),
            "Two Crore Fifty Lakh Fifty Thousand Five Rupees Only",
        )

    def test_crore_count_above_ninety_nine(self):
        self.assertEqual(words_for(Decimal("10000000000")), "One Thousand Crore Rupees Only")
        self.assertEqual(words_for(Decimal("1230000000")), "One Hundred Twenty Three Crore Rupees Only")

    def test_negative(self):
        self.assertEqual(words_for(Decimal("-45")), "Minus Forty Five Rupees Only")

    def test_paise_rounded_half_up(self):
        self.assertEqual(words_for(Decimal("1.005")), "One Rupees and One Paise Only")

    def test_always_ends_with_only(self):
        for value in ("0.01", "9", "99.99", "100", "1000.10", "99999999.99"):
            self.assertTrue(words_for(Decimal(value)).endswith("Only"), value)


class TestFormatIndianCurrency(unittest.TestCase):
    def test_grouping(self):
        self.assertEqual(format_indian_currency(Decimal("123456")), "₹1,23,456.00")
        self.assertEqual(format_indian_currency(Decimal("12345678.5")), "₹1,23,45,678.50")

    def test_small_and_negative(self):
        self.assertEqual(format_indian_currency(Decimal("999")), "₹999.00")
        self.assertEqual(format_indian_currency(Decimal("-1500")), "₹-1,500.00")


if __name__ == "__main__":
    unittest.main()
