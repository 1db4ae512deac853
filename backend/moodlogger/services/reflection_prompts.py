"""Daily reflection prompt, stable for a given calendar day."""
from datetime import date

REFLECTION_PROMPTS = (
    "What made today good?",
    "What could tomorrow be better?",
    "What are three things you're grateful for today?",
    "What's one thing that made you smile?",
    "What challenge did you overcome today?",
    "What's something you learned about yourself?",
    "Who made a positive impact on your day?",
    "What's one small win you achieved today?",
    "How did you take care of yourself today?",
    "What's something you're looking forward to?",
)

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def date_seed_string(day: date) -> str:
    """Render ``day`` as e.g. "Sun Oct 18 2026", independent of locale."""
    return f"{_WEEKDAYS[day.weekday()]} {_MONTHS[day.month - 1]} {day.day:02d} {day.year}"


def prompt_for_day(day: date) -> str:
    seed = sum(ord(ch) for ch in date_seed_string(day))
    return REFLECTION_PROMPTS[seed % len(REFLECTION_PROMPTS)]
