"""
Week scheduling helpers.

Days of the week are numbered 0=Sunday ... 6=Saturday throughout the plan.
"""
from datetime import date, timedelta


def day_of_week(d: date) -> int:
    """Sunday-based day index for a date."""
    return (d.weekday() + 1) % 7


def _this_week_date(today: date, dow: int) -> date:
    return today + timedelta(days=dow - day_of_week(today))


def calculate_start_date(training_days: list[int], today: date) -> date:
    """First date of the generated week.

    - today after the last training day: first training day of next week
    - today is a training day: today
    - today before the first training day: first training day of this week
    - otherwise: the next training day after today, this week
    """
    if not training_days:
        raise ValueError("training_days cannot be empty")
    invalid = [d for d in training_days if d < 0 or d > 6]
    if invalid:
        raise ValueError(
            f"Invalid day indices: {invalid}. Days must be between 0 (Sunday) and 6 (Saturday)."
        )

    ordered = sorted(training_days)
    first, last = ordered[0], ordered[-1]
    current = day_of_week(today)

    if current > last:
        return _this_week_date(today, first) + timedelta(days=7)
    if current in ordered:
        return today
    if current < first:
        return _this_week_date(today, first)
    next_day = next(d for d in ordered if d > current)
    return _this_week_date(today, next_day)


def session_date(start: date, dow: int) -> date:
    """Date of the session on ``dow``, the first such day on or after ``start``."""
    return start + timedelta(days=(dow - day_of_week(start)) % 7)
