from datetime import datetime, timezone


def utc_now() -> datetime:
    # Naive UTC: SQLite drops tzinfo on round-trip, so everything is stored naive.
    return datetime.now(timezone.utc).replace(tzinfo=None)
