import datetime as dt
import unittest

from fastapi.testclient import TestClient

from app.cache_store.memory import InMemoryCacheStore
from app.domain import Holiday
from app.errors import UpstreamUnavailable
from app.main import app as fastapi_app
from app.search_cache import SearchCacheGate

NOW = dt.datetime(2025, 1, 1, 9, 0, tzinfo=dt.timezone.utc)

SEARCH_BODY = {"origin": "sin", "destination": "BKK", "date_from": "2025-02-14", "date_to": "2025-02-17"}


class FakeSearchFetcher:
    def __init__(self, error=None, currency="USD"):
        self.error = error
        self.currency = currency
        self.calls = 0

    def search(self, params):
        self.calls += 1
        if self.error:
            raise self.error
        return {
            "currency": self.currency,
            "data": [
                {"price": 100, "airlines": ["TR"], "deep_link": "https://www.kiwi.com/deep?a=1"},
                {"conversion": {"USD": 150}, "airlines": ["SQ"]},
            ],
        }


class FakeRateFetcher:
    def fetch_rate_to_sgd(self, currency):
        return 1.3333


class FakeHolidaySource:
    def __init__(self, holidays):
        self.holidays = holidays

    def ensure_schema(self):
        pass

    def upcoming_holidays(self, today, limit=60):
        return [h for h in self.holidays if h.date >= today][:limit]

    def holiday_dates(self, today, limit=60):
        return frozenset(h.date for h in self.upcoming_holidays(today, limit))


class TestApi(unittest.TestCase):
    def setUp(self):
        import app.api as api_mod

        self.api_mod = api_mod
        self._orig = {
            name: getattr(api_mod, name)
            for name in ("CACHE", "SEARCH_GATE", "SEARCH_FETCHER", "RATE_FETCHER", "HOLIDAY_SOURCE", "utc_now")
        }
        self.cache = InMemoryCacheStore()
        self.search_fetcher = FakeSearchFetcher()
        self.rate_fetcher = FakeRateFetcher()
        api_mod.CACHE = self.cache
        api_mod.SEARCH_GATE = SearchCacheGate(self.cache, ttl_seconds=1800)
        api_mod.SEARCH_FETCHER = self.search_fetcher
        api_mod.RATE_FETCHER = self.rate_fetcher
        api_mod.HOLIDAY_SOURCE = FakeHolidaySource(
            [
                Holiday(date=dt.date(2024, 12, 25), name="Christmas Day"),
                Holiday(date=dt.date(2025, 1, 1), name="New Year's Day"),
                Holiday(date=dt.date(2025, 1, 13), name="Made-up Monday"),
            ]
        )
        api_mod.utc_now = lambda: NOW
        self.client = TestClient(fastapi_app)

    def tearDown(self):
        for name, value in self._orig.items():
            setattr(self.api_mod, name, value)

    def test_health(self):
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})

    def test_holidays_lists_upcoming_only(self):
        resp = self.client.get("/api/holidays/sg")
        self.assertEqual(resp.status_code, 200)
        names = [h["name"] for h in resp.json()["holidays"]]
        self.assertEqual(names, ["New Year's Day", "Made-up Monday"])

    def test_weekend_suggestions(self):
        resp = self.client.get("/api/suggestions/weekends", params={"count": 2})
        self.assertEqual(resp.status_code, 200)
        weekends = resp.json()["weekends"]
        self.assertEqual(len(weekends), 2)
        self.assertEqual(weekends[0]["start"], "2025-01-03")
        self.assertFalse(weekends[0]["is_leave_hack"])
        self.assertEqual(weekends[1]["start"], "2025-01-10")
        self.assertEqual(weekends[1]["end"], "2025-01-13")
        self.assertTrue(weekends[1]["is_leave_hack"])
        self.assertEqual(weekends[1]["reason"], "MonPH")

    def test_weekend_count_out_of_range(self):
        resp = self.client.get("/api/suggestions/weekends", params={"count": -1})
        self.assertEqual(resp.status_code, 422)

    def test_search_then_cache_hit_then_not_modified(self):
        first = self.client.post("/api/search/flights", json=SEARCH_BODY)
        self.assertEqual(first.status_code, 200)
        body = first.json()
        self.assertFalse(body["cache_hit"])
        self.assertEqual([d["price"] for d in body["deals"]], [133, 200])
        self.assertTrue(all(d["currency"] == "SGD" for d in body["deals"]))
        etag = first.headers["ETag"]
        self.assertTrue(etag.startswith('"') and etag.endswith('"'))
        self.assertEqual(first.headers["Cache-Control"], "max-age=1800")

        second = self.client.post("/api/search/flights", json=SEARCH_BODY)
        self.assertEqual(second.status_code, 200)
        self.assertTrue(second.json()["cache_hit"])
        self.assertEqual(second.headers["ETag"], etag)
        self.assertEqual(self.search_fetcher.calls, 1)

        third = self.client.post("/api/search/flights", json=SEARCH_BODY, headers={"If-None-Match": etag})
        self.assertEqual(third.status_code, 304)
        self.assertEqual(third.headers["ETag"], etag)
        self.assertEqual(self.search_fetcher.calls, 1)

    def test_stale_etag_gets_full_response(self):
        self.client.post("/api/search/flights", json=SEARCH_BODY)
        resp = self.client.post("/api/search/flights", json=SEARCH_BODY, headers={"If-None-Match": '"old"'})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["cache_hit"])

    def test_upstream_failure_maps_to_502(self):
        self.api_mod.SEARCH_FETCHER = FakeSearchFetcher(error=UpstreamUnavailable("kiwi_search", 500))
        resp = self.client.post("/api/search/flights", json=SEARCH_BODY)
        self.assertEqual(resp.status_code, 502)

    def test_bad_provider_currency_maps_to_502(self):
        self.api_mod.SEARCH_FETCHER = FakeSearchFetcher(currency="US$")
        resp = self.client.post("/api/search/flights", json=SEARCH_BODY)
        self.assertEqual(resp.status_code, 502)
        self.assertIn("currency", resp.json()["detail"])

    def test_invalid_search_params_rejected_with_400(self):
        for override in ({"date_from": "2025-02-20"}, {"origin": "SINGAPORE"}, {"cabin": "X"}, {"extra": 1}):
            resp = self.client.post("/api/search/flights", json=dict(SEARCH_BODY, **override))
            self.assertEqual(resp.status_code, 400, override)
        self.assertEqual(self.search_fetcher.calls, 0)

    def test_non_object_body_rejected(self):
        resp = self.client.post("/api/search/flights", json=["SIN"])
        self.assertEqual(resp.status_code, 422)


if __name__ == "__main__":
    unittest.main()
