"""Column helpers shared by the directory tables."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware current time, used for Python-side timestamp defaults."""
    return datetime.now(timezone.utc)
