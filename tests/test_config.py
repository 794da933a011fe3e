import os
import unittest

from app.config import Settings


class TestConfig(unittest.TestCase):
    def test_settings_defaults(self):
        previous = os.environ.pop("TRIPZ_FX_TTL_SECONDS", None)
        try:
            s = Settings(_env_file=None)
            self.assertEqual(s.fx_ttl_seconds, 86400)
            self.assertEqual(s.search_ttl_seconds, 1800)
            self.assertEqual(s.max_results, 20)
            self.assertEqual(s.cache_key_prefix, "tripz:")
        finally:
            if previous is not None:
                os.environ["TRIPZ_FX_TTL_SECONDS"] = previous

    def test_settings_env_override(self):
        previous = os.environ.get("TRIPZ_FX_API_BASE")
        try:
            os.environ["TRIPZ_FX_API_BASE"] = "http://fx.example.com/"
            s = Settings(_env_file=None)
            self.assertEqual(s.fx_api_base, "http://fx.example.com")
        finally:
            if previous is None:
                os.environ.pop("TRIPZ_FX_API_BASE", None)
            else:
                os.environ["TRIPZ_FX_API_BASE"] = previous

    def test_search_ttl_override(self):
        previous = os.environ.get("TRIPZ_SEARCH_TTL_SECONDS")
        try:
            os.environ["TRIPZ_SEARCH_TTL_SECONDS"] = "60"
            s = Settings(_env_file=None)
            self.assertEqual(s.search_ttl_seconds, 60)
        finally:
            if previous is None:
                os.environ.pop("TRIPZ_SEARCH_TTL_SECONDS", None)
            else:
                os.environ["TRIPZ_SEARCH_TTL_SECONDS"] = previous


if __name__ == "__main__":
    unittest.main()
