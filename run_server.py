import argparse
import os

import uvicorn

from app.config import settings
from app.data_sources import SqlHolidaySource
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


def seed_holidays() -> None:
    """Load the built-in Singapore holiday list into the configured database."""
    source = SqlHolidaySource.from_url(settings.holiday_database_url)
    count = source.seed_holidays()
    logger.info(f"Seeded {count} holidays")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the Tripz deal API")
    parser.add_argument("--seed-holidays", action="store_true", help="seed the holiday table before starting")
    args = parser.parse_args()

    setup_logging(level=settings.log_level, job_name="tripz_api")
    if args.seed_holidays:
        seed_holidays()

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=False,
    )
