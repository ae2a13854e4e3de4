from datetime import datetime, timezone
import time


def get_current_timestamp() -> int:
    """Get current time as millisecond timestamp"""
    return int(time.time() * 1000)

def from_timestamp(timestamp: int) -> datetime:
    """Convert millisecond timestamp to UTC datetime"""
    return datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)

def elapsed_ms(start: float) -> float:
    """Milliseconds elapsed since a time.monotonic() reading"""
    return (time.monotonic() - start) * 1000

def format_timestamp(timestamp: int) -> str:
    """Millisecond timestamp as an ISO 8601 UTC string"""
    return from_timestamp(timestamp).strftime('%Y-%m-%dT%H:%M:%SZ')
