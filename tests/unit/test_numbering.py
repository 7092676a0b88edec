import unittest

from core.errors import ValidationError
from services.numbering import allocate_number


class TestAllocateNumber(unittest.TestCase):
    def test_draft_never_moves_counter(self):
        a = allocate_number(42, is_draft=True, candidate_number=100)
        self.assertIsNone(a.assigned_number)
        self.assertEqual(a.next_counter, 42)
        self.assertFalse(a.advances_counter)

    def test_default_takes_counter(self):
        a = allocate_number(7, is_draft=False)
        self.assertEqual(a.assigned_number, 7)
        self.assertEqual(a.next_counter, 8)
        self.assertTrue(a.advances_counter)

    def test_jump_ahead_moves_counter_past_candidate(self):
        a = allocate_number(7, is_draft=False, candidate_number=50)
        self.assertEqual(a.assigned_number, 50)
        self.assertEqual(a.next_counter, 51)

    def test_backfill_leaves_counter(self):
        a = allocate_number(7, is_draft=False, candidate_number=3)
        self.assertEqual(a.assigned_number, 3)
        self.assertEqual(a.next_counter, 7)

    def test_missing_or_zero_counter_starts_at_one(self):
        self.assertEqual(allocate_number(None, is_draft=False).assigned_number, 1)
        self.assertEqual(allocate_number(0, is_draft=False).next_counter, 2)

    def test_invalid_candidates(self):
        for bad in (0, -5, "12", 1.5, True):
            with self.assertRaises(ValidationError, msg=repr(bad)):
                allocate_number(1, is_draft=False, candidate_number=bad)


if __name__ == "__main__":
    unittest.main()
