"""Calendar classification of release timestamps."""

from datetime import datetime

from release_dashboard.errors import InvalidTimestamp

# Indexed by day-of-week with Sunday = 0
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

WORKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
ALL_DAYS = WORKDAYS + ["Saturday", "Sunday"]


def parse_timestamp(value, field="published_at"):
    """Parse an ISO 8601 timestamp ('2023-01-04T09:30:00Z') into a datetime.

    The offset carried by the string is kept as is; no conversion to another zone.

    Raises:
        InvalidTimestamp: if the value is missing or not ISO 8601.
    """
    if not value or not isinstance(value, str):
        raise InvalidTimestamp(value, field)
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidTimestamp(value, field)


def weekday_name(dt):
    """English weekday name of a datetime or date."""
    return WEEKDAY_NAMES[dt.isoweekday() % 7]


def is_workday(weekday):
    return weekday in WORKDAYS


def classify(value, field="published_at"):
    """Derive the calendar fields of a timestamp.

    Returns:
        dict with weekday, date (YYYY-MM-DD), year (4-digit text),
        month (zero-padded text "01".."12") and week (ISO week number).
    """
    dt = parse_timestamp(value, field)
    return {
        "weekday": weekday_name(dt),
        "date": dt.strftime("%Y-%m-%d"),
        "year": f"{dt.year:04d}",
        "month": f"{dt.month:02d}",
        "week": dt.isocalendar()[1],
    }


def iso_week_label(date_str):
    """'2023-01-01' -> '2022-W52' (ISO year, zero-padded ISO week)."""
    iso_year, iso_week, _ = datetime.strptime(date_str, "%Y-%m-%d").isocalendar()
    return f"{iso_year:04d}-W{iso_week:02d}"
