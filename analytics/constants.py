"""Shared constants for the analytics engine."""

# Untagged sentinel buckets
NEUTRAL_EMOTION = "Neutral"
DISCIPLINED_MISTAKE = "No Mistake (Disciplined)"

# Reported for profit factor / risk-reward when the denominator is zero
# but there is a winning side ("infinite edge").
RATIO_SENTINEL = 99.0

# Market session hours (local time) shown in the hourly breakdown
MARKET_HOURS = (9, 10, 11, 12, 13, 14, 15)

# Python weekday() numbering, Monday = 0
TRADING_WEEKDAYS = (0, 1, 2, 3, 4)
WEEKDAY_LABELS = {
    0: "Monday",
    1: "Tuesday",
    2: "Wednesday",
    3: "Thursday",
    4: "Friday",
}


def hour_label(hour: int) -> str:
    """12-hour clock label: 9 -> '9 AM', 12 -> '12 PM', 15 -> '3 PM'."""
    if hour == 12:
        return "12 PM"
    if hour > 12:
        return f"{hour - 12} PM"
    return f"{hour} AM"
