"""SQL-backed public holiday calendar.

Holidays live in a two-column table (``date`` as ISO ``YYYY-MM-DD`` text,
``name``), which works unchanged on SQLite and Postgres. The classifier only
ever sees the date values.
"""

from __future__ import annotations

import datetime as dt
import re
from typing import Iterable, List, Sequence, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from app.domain import Holiday
from app.errors import InvalidArgument
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="holiday_source")

DEFAULT_TABLE = "sg_holidays"
DEFAULT_LIMIT = 60

SG_HOLIDAYS_2025: Tuple[Tuple[str, str], ...] = (
    ("2025-01-01", "New Year's Day"),
    ("2025-01-29", "Chinese New Year"),
    ("2025-01-30", "Chinese New Year (Day 2)"),
    ("2025-04-18", "Good Friday"),
    ("2025-05-01", "Labour Day"),
    ("2025-05-12", "Vesak Day (Observed)"),
    ("2025-06-06", "Hari Raya Haji"),
    ("2025-08-09", "National Day"),
    ("2025-10-20", "Deepavali"),
    ("2025-12-25", "Christmas Day"),
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


class SqlHolidaySource:
    """Read (and seed) public holidays from a SQL table."""

    def __init__(self, engine: Engine, *, table: str = DEFAULT_TABLE) -> None:
        if not _IDENTIFIER.match(table):
            raise InvalidArgument(f"Invalid holiday table name: {table!r}")
        self.engine = engine
        self.table = table

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "SqlHolidaySource":
        """Create an engine from a URL and build the source."""
        engine = create_engine(database_url, future=True)
        return cls(engine, **kwargs)

    def ensure_schema(self) -> None:
        """Create the holiday table if it does not exist yet."""
        ddl = text(
            f"CREATE TABLE IF NOT EXISTS {self.table} ("
            "date VARCHAR(10) PRIMARY KEY, "
            "name VARCHAR(200) NOT NULL)"
        )
        with self.engine.begin() as conn:
            conn.execute(ddl)

    def seed_holidays(self, holidays: Iterable[Tuple[str, str]] = SG_HOLIDAYS_2025) -> int:
        """Insert or replace the given ``(iso_date, name)`` rows; returns the row count."""
        rows = [{"date": dt.date.fromisoformat(d).isoformat(), "name": name} for d, name in holidays]
        self.ensure_schema()
        with self.engine.begin() as conn:
            for row in rows:
                conn.execute(text(f"DELETE FROM {self.table} WHERE date = :date"), {"date": row["date"]})
                conn.execute(text(f"INSERT INTO {self.table} (date, name) VALUES (:date, :name)"), row)
        logger.info("Seeded holidays", extra={"count": len(rows), "table": self.table})
        return len(rows)

    def upcoming_holidays(self, today: dt.date, limit: int = DEFAULT_LIMIT) -> List[Holiday]:
        """Holidays on or after ``today``, earliest first."""
        query = text(
            f"SELECT date, name FROM {self.table} "
            "WHERE date >= :today ORDER BY date LIMIT :limit"
        )
        with self.engine.connect() as conn:
            rows: Sequence = conn.execute(query, {"today": today.isoformat(), "limit": limit}).mappings().all()
        return [Holiday(date=dt.date.fromisoformat(str(r["date"])[:10]), name=r["name"]) for r in rows]

    def holiday_dates(self, today: dt.date, limit: int = DEFAULT_LIMIT) -> frozenset[dt.date]:
        """The upcoming holiday dates as a set, ready for the classifier."""
        return frozenset(h.date for h in self.upcoming_holidays(today, limit=limit))
