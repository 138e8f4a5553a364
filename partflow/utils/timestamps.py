from datetime import datetime, timezone


def utc_now_iso() -> str:
    """Current UTC instant as an ISO-8601 string with a ``Z`` suffix."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="microseconds")
        .replace("+00:00", "Z")
    )


def epoch_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)
