from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, Column


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def timestamp_column(nullable: bool = False) -> Column:
    # every table needs its own Column instance
    return Column(TIMESTAMP(timezone=True), nullable=nullable)
