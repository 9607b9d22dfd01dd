import random
import unittest
from datetime import date, timedelta

from quotely import selection
from quotely.db import STATUS_APPROVED, STATUS_PENDING, InMemoryDbClient


class DailyIndexTests(unittest.TestCase):
    def test_seed_encodes_calendar_date(self):
        self.assertEqual(selection.daily_seed(date(2024, 3, 7)), 20240307)

    def test_index_in_range_and_stable(self):
        start = date(2023, 12, 25)
        for offset in range(0, 800, 17):
            day = start + timedelta(days=offset)
            for total in (1, 2, 3, 10, 49, 1000):
                index = selection.daily_index(day, total)
                self.assertGreaterEqual(index, 0)
                self.assertLess(index, total)
                self.assertEqual(index, selection.daily_index(day, total))

    def test_index_is_seed_modulo_total(self):
        self.assertEqual(selection.daily_index(date(2024, 1, 2), 7), 20240102 % 7)

    def test_empty_collection_has_no_index(self):
        self.assertIsNone(selection.daily_index(date(2024, 1, 1), 0))

    def test_today_in_timezone(self):
        self.assertIsInstance(selection.today_in("UTC"), date)
        self.assertIsInstance(selection.today_in("Asia/Tokyo"), date)


class PickTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.quotes = [
            self.db.create_quote(content=f"q{i}", author="A") for i in range(5)
        ]

    def test_daily_quote_uses_natural_order_offset(self):
        day = date(2024, 5, 17)
        expected = self.quotes[selection.daily_index(day, 5)]
        self.assertEqual(selection.daily_quote(self.db, day).id, expected.id)
        self.assertEqual(selection.daily_quote(self.db, day).id, expected.id)

    def test_random_quote_with_seeded_rng(self):
        rng = random.Random(42)
        expected_offset = random.Random(42).randrange(5)
        picked = selection.random_quote(self.db, rng)
        self.assertEqual(picked.id, self.quotes[expected_offset].id)

    def test_random_index_range(self):
        rng = random.Random(7)
        seen = {selection.random_index(3, rng) for _ in range(200)}
        self.assertEqual(seen, {0, 1, 2})

    def test_empty_collections_give_none(self):
        empty = InMemoryDbClient()
        self.assertIsNone(selection.daily_quote(empty, date(2024, 1, 1)))
        self.assertIsNone(selection.random_quote(empty))
        self.assertIsNone(selection.daily_proverb(empty, date(2024, 1, 1)))
        self.assertIsNone(selection.random_proverb(empty))
        self.assertIsNone(selection.random_index(0))


class ProverbPickTests(unittest.TestCase):
    def test_only_approved_proverbs_are_eligible(self):
        db = InMemoryDbClient()
        db.create_proverb(content="hidden", status=STATUS_PENDING)
        shown = db.create_proverb(content="shown", status=STATUS_APPROVED)
        db.create_proverb(content="hidden too", status=STATUS_PENDING)

        for seed in range(20):
            picked = selection.random_proverb(db, random.Random(seed))
            self.assertEqual(picked.id, shown.id)
        self.assertEqual(selection.daily_proverb(db, date(2024, 2, 29)).id, shown.id)

    def test_no_approved_proverbs(self):
        db = InMemoryDbClient()
        db.create_proverb(content="pending", status=STATUS_PENDING)
        self.assertIsNone(selection.random_proverb(db))
        self.assertIsNone(selection.daily_proverb(db, date(2024, 2, 29)))


if __name__ == "__main__":
    unittest.main()
