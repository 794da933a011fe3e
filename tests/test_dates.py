import datetime as dt
import unittest

from app.dates import DateRange, add_days, next_friday, next_n_weekends, to_holiday_set, to_utc_date
from app.errors import InvalidArgument


class TestNextNWeekends(unittest.TestCase):
    def test_returns_n_friday_to_sunday_windows(self):
        weekends = next_n_weekends(12, dt.date(2025, 1, 1))  # Wednesday
        self.assertEqual(len(weekends), 12)
        for w in weekends:
            self.assertEqual(w.start.weekday(), 4)
            self.assertEqual(w.end.weekday(), 6)
            self.assertEqual(w.end - w.start, dt.timedelta(days=2))
        for prev, cur in zip(weekends, weekends[1:]):
            self.assertEqual(cur.start - prev.start, dt.timedelta(days=7))

    def test_first_window_starts_on_next_friday(self):
        weekends = next_n_weekends(2, dt.date(2025, 1, 1))
        self.assertEqual(weekends[0], DateRange(dt.date(2025, 1, 3), dt.date(2025, 1, 5)))
        self.assertEqual(weekends[1].start, dt.date(2025, 1, 10))

    def test_friday_reference_is_first_start(self):
        weekends = next_n_weekends(1, dt.date(2025, 1, 3))
        self.assertEqual(weekends[0].start, dt.date(2025, 1, 3))

    def test_saturday_reference_skips_to_following_friday(self):
        self.assertEqual(next_friday(dt.date(2025, 1, 4)), dt.date(2025, 1, 10))

    def test_non_positive_count_is_empty(self):
        self.assertEqual(next_n_weekends(0, dt.date(2025, 1, 1)), [])
        self.assertEqual(next_n_weekends(-3, dt.date(2025, 1, 1)), [])

    def test_aware_datetime_uses_utc_date(self):
        # Thursday evening in Los Angeles is already Friday in UTC
        ref = dt.datetime(2025, 1, 2, 20, 0, tzinfo=dt.timezone(dt.timedelta(hours=-8)))
        self.assertEqual(next_n_weekends(1, ref)[0].start, dt.date(2025, 1, 3))

    def test_naive_datetime_taken_as_utc(self):
        self.assertEqual(to_utc_date(dt.datetime(2025, 1, 2, 23, 59)), dt.date(2025, 1, 2))


class TestDateRange(unittest.TestCase):
    def test_rejects_inverted_range(self):
        with self.assertRaises(InvalidArgument):
            DateRange(dt.date(2025, 1, 5), dt.date(2025, 1, 3))

    def test_days_counts_both_ends(self):
        self.assertEqual(DateRange(dt.date(2025, 1, 3), dt.date(2025, 1, 6)).days, 4)

    def test_add_days_crosses_year(self):
        self.assertEqual(add_days(dt.date(2024, 12, 31), 1), dt.date(2025, 1, 1))

    def test_holiday_set_normalizes_datetimes(self):
        holidays = to_holiday_set([dt.datetime(2025, 1, 6, tzinfo=dt.timezone.utc), dt.date(2025, 1, 6)])
        self.assertEqual(holidays, frozenset({dt.date(2025, 1, 6)}))


if __name__ == "__main__":
    unittest.main()
