"""
Unit tests for derived mood statistics.
"""
from datetime import datetime, timedelta, timezone

from moodlogger.services.mood_stats import (
    MoodSample,
    average_mood,
    best_day_of_week,
    calculate_streak,
    entries_in_window,
    mood_counts,
    round_half_up,
    summarize_moods,
    weekly_change,
)

# A Wednesday, mid-afternoon UTC
NOW = datetime(2026, 10, 14, 15, 0, tzinfo=timezone.utc)


def days_ago(n: int, hour: int = 12) -> datetime:
    return (NOW - timedelta(days=n)).replace(hour=hour)


class TestStreak:
    """Consecutive-day streak ending today."""

    def test_three_consecutive_days(self):
        timestamps = [days_ago(0), days_ago(1), days_ago(2)]
        assert calculate_streak(timestamps, now=NOW) == 3

    def test_no_entry_today_means_no_streak(self):
        timestamps = [days_ago(1), days_ago(2)]
        assert calculate_streak(timestamps, now=NOW) == 0

    def test_gap_stops_the_count(self):
        timestamps = [days_ago(0), days_ago(1), days_ago(3), days_ago(4)]
        assert calculate_streak(timestamps, now=NOW) == 2

    def test_same_day_entries_count_once(self):
        timestamps = [days_ago(0, hour=8), days_ago(0, hour=9), days_ago(1)]
        assert calculate_streak(timestamps, now=NOW) == 2

    def test_empty_history(self):
        assert calculate_streak([], now=NOW) == 0

    def test_days_follow_the_callers_timezone(self):
        """23:30 UTC yesterday is already today at UTC+5."""
        plus_five = timezone(timedelta(hours=5))
        timestamps = [days_ago(1, hour=23).replace(minute=30)]
        assert calculate_streak(timestamps, now=NOW, tz=timezone.utc) == 0
        assert calculate_streak(timestamps, now=NOW, tz=plus_five) == 1

    def test_naive_timestamps_are_utc(self):
        timestamps = [days_ago(0).replace(tzinfo=None)]
        assert calculate_streak(timestamps, now=NOW) == 1


class TestAverages:

    def test_average(self):
        entries = [MoodSample(NOW, 3), MoodSample(NOW, 4), MoodSample(NOW, 5)]
        assert average_mood(entries) == 4.0

    def test_average_of_nothing_is_zero(self):
        assert average_mood([]) == 0.0

    def test_weekly_change_percentage(self):
        assert weekly_change(4.0, 2.0) == 100.0
        assert weekly_change(3.0, 4.0) == -25.0

    def test_weekly_change_without_previous_week(self):
        assert weekly_change(4.0, 0.0) == 0.0


class TestWindows:

    def test_trailing_and_previous_week(self):
        entries = [
            MoodSample(days_ago(1), 5),
            MoodSample(days_ago(6), 4),
            MoodSample(days_ago(8), 2),
            MoodSample(days_ago(20), 1),
        ]
        this_week = entries_in_window(entries, 7, now=NOW)
        last_week = entries_in_window(entries, 7, now=NOW, offset_days=7)

        assert [e.mood_level for e in this_week] == [5, 4]
        assert [e.mood_level for e in last_week] == [2]


class TestBestDay:

    def test_highest_average_weekday(self):
        monday = datetime(2026, 10, 12, 10, tzinfo=timezone.utc)
        tuesday = monday + timedelta(days=1)
        entries = [
            MoodSample(monday, 2),
            MoodSample(monday, 4),
            MoodSample(tuesday, 5),
        ]
        assert best_day_of_week(entries) == "Tuesday"

    def test_tie_goes_to_first_seen(self):
        monday = datetime(2026, 10, 12, 10, tzinfo=timezone.utc)
        tuesday = monday + timedelta(days=1)
        entries = [MoodSample(tuesday, 4), MoodSample(monday, 4)]
        assert best_day_of_week(entries) == "Tuesday"

    def test_no_entries(self):
        assert best_day_of_week([]) == "N/A"


class TestSummary:

    def test_dashboard_summary(self):
        entries = [
            MoodSample(days_ago(10), 2),
            MoodSample(days_ago(9), 2),
            MoodSample(days_ago(2), 3),
            MoodSample(days_ago(1), 4),
            MoodSample(days_ago(0), 4),
        ]
        summary = summarize_moods(entries, now=NOW)

        assert summary.weekly_average == 3.7
        assert summary.monthly_average == 3.0
        assert summary.weekly_change == 83
        assert summary.mood_counts == {1: 0, 2: 2, 3: 1, 4: 2, 5: 0}

    def test_empty_summary(self):
        summary = summarize_moods([], now=NOW)

        assert summary.weekly_average == 0.0
        assert summary.weekly_change == 0
        assert summary.best_day == "N/A"
        assert mood_counts([]) == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}

    def test_half_averages_round_up(self):
        entries = [MoodSample(days_ago(n), mood) for n, mood in enumerate([2, 2, 3, 2])]
        summary = summarize_moods(entries, now=NOW)

        assert summary.weekly_average == 2.3
        assert summary.monthly_average == 2.3

    def test_half_percent_change_rounds_up(self):
        entries = [
            MoodSample(days_ago(10), 4),
            MoodSample(days_ago(1), 4),
            MoodSample(days_ago(0), 5),
        ]
        summary = summarize_moods(entries, now=NOW)

        assert summary.weekly_change == 13


class TestRoundHalfUp:

    def test_halves_round_away_from_zero(self):
        assert round_half_up(2.25, 1) == 2.3
        assert round_half_up(12.5) == 13
        assert round_half_up(-12.5) == -13
        assert round_half_up(0.5) == 1

    def test_other_values_round_to_nearest(self):
        assert round_half_up(3.6666666, 1) == 3.7
        assert round_half_up(83.333) == 83
        assert round_half_up(2.0, 1) == 2.0
