from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def resolve_timezone(requested, default: str) -> str:
    """Only accept Area/Location style names; anything else uses the default"""
    if not isinstance(requested, str) or "/" not in requested:
        return default
    return requested


def get_time_data(tz: str, now: Optional[datetime] = None) -> dict:
    """
    Current time in the requested zone. Raises for unknown zones
    (zoneinfo.ZoneInfoNotFoundError / ValueError).
    """
    zone = timezone.utc if tz == "UTC" else ZoneInfo(tz)
    now = now or datetime.now(timezone.utc)
    local = now.astimezone(zone)

    return {
        "ok": True,
        "timezone_requested": tz,
        "iso_utc": now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "unix_ms": int(now.timestamp() * 1000),
        "local_pretty": local.strftime("%a, %b %d, %Y, %I:%M:%S %p"),
        "parts": {
            "date": local.strftime("%Y-%m-%d"),
            "time_24h": local.strftime("%H:%M:%S"),
        },
    }
