import types
import unittest

import app.data_sources.factory as factory
from app.data_sources.base import CallableFlightSearchFetcher, CallableRateFetcher


class DummySettings:
    def __init__(self, **kwargs):
        self.flight_api_base = "https://tequila.test"
        self.flight_api_key = "key"
        self.fx_api_base = "https://fx.test"
        self.holiday_database_url = "sqlite://"
        self.http_timeout_seconds = 3.0
        for k, v in kwargs.items():
            setattr(self, k, v)


class TestDataSourceFactory(unittest.TestCase):
    def test_rate_fetcher_binds_settings(self):
        seen = {}
        orig = factory.fetch_rate_to_sgd

        def fake_fetch(currency, *, api_base, timeout):
            seen.update(currency=currency, api_base=api_base, timeout=timeout)
            return 1.5

        try:
            factory.fetch_rate_to_sgd = fake_fetch
            fetcher = factory.build_rate_fetcher(DummySettings())
        finally:
            factory.fetch_rate_to_sgd = orig
        self.assertIsInstance(fetcher, CallableRateFetcher)
        self.assertEqual(fetcher.fetch_rate_to_sgd("USD"), 1.5)
        self.assertEqual(seen, {"currency": "USD", "api_base": "https://fx.test", "timeout": 3.0})

    def test_search_fetcher_binds_credentials(self):
        seen = {}
        orig = factory.search_flights_raw

        def fake_search(params, *, api_base, api_key, timeout):
            seen.update(api_base=api_base, api_key=api_key, timeout=timeout)
            return {"data": []}

        try:
            factory.search_flights_raw = fake_search
            fetcher = factory.build_search_fetcher(DummySettings(flight_api_key=None))
        finally:
            factory.search_flights_raw = orig
        self.assertIsInstance(fetcher, CallableFlightSearchFetcher)
        self.assertEqual(fetcher.search(object()), {"data": []})
        self.assertEqual(seen, {"api_base": "https://tequila.test", "api_key": None, "timeout": 3.0})

    def test_holiday_source_uses_from_url(self):
        sentinel = object()
        from app.data_sources import holiday_source as hs_module

        orig_class = hs_module.SqlHolidaySource
        try:
            hs_module.SqlHolidaySource = types.SimpleNamespace(from_url=lambda url: sentinel)
            source = factory.build_holiday_source(DummySettings(holiday_database_url="postgresql://u:p@h/db"))
            self.assertIs(source, sentinel)
        finally:
            hs_module.SqlHolidaySource = orig_class

    def test_holiday_source_missing_url_raises(self):
        with self.assertRaises(ValueError):
            factory.build_holiday_source(DummySettings(holiday_database_url=None))


if __name__ == "__main__":
    unittest.main()
