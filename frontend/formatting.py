from datetime import datetime

from core.domain.models.task import utcnow

PRIORITY_COLORS = {
    "Minor": "#808080",
    "Low": "#00FF00",
    "Moderate": "#FFFF00",
    "Important": "#FFA500",
    "Critical": "#FF0000",
}

_UNITS = (
    (365 * 24 * 3600, "year"),
    (30 * 24 * 3600, "month"),
    (24 * 3600, "day"),
    (3600, "hour"),
    (60, "minute"),
)


def format_date(value: datetime | None) -> str:
    if value is None:
        return "-"
    return f"{value:%B} {value.day}, {value.year}"


def from_now(value: datetime | None, now: datetime | None = None) -> str:
    """Tiempo relativo legible: "in 3 days", "2 hours ago"."""
    if value is None:
        return "-"
    now = now or utcnow()
    seconds = (value - now).total_seconds()
    magnitude = abs(seconds)

    text = "a few seconds"
    for size, unit in _UNITS:
        if magnitude >= size:
            amount = round(magnitude / size)
            text = f"{amount} {unit}" + ("s" if amount != 1 else "")
            break

    return f"in {text}" if seconds > 0 else f"{text} ago"
