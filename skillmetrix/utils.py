"""Small helpers shared by the models and the store."""
from datetime import datetime, timezone


def utcnow():
    """Current UTC time, naive to match the timezone-less DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
