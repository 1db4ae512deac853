"""Matplotlib-based mood history chart.

Renders the trailing mood series as a PNG line chart, one point per entry.
"""
import io
import logging
from collections.abc import Sequence
from datetime import timezone, tzinfo

from matplotlib.figure import Figure

from moodlogger.services.mood_stats import MoodRecord, ensure_aware

logger = logging.getLogger(__name__)

LINE_COLOR = "#6366f1"
GRID_COLOR = "#e5e7eb"


def format_chart_label(entry: MoodRecord, tz: tzinfo = timezone.utc) -> str:
    """Axis label for an entry, e.g. "Oct 18"."""
    return ensure_aware(entry.created_at).astimezone(tz).strftime("%b %d")


def generate_mood_history_chart(
    entries: Sequence[MoodRecord], tz: tzinfo = timezone.utc
) -> bytes:
    """Render ``entries`` (oldest first) as PNG bytes."""
    labels = [format_chart_label(e, tz) for e in entries]
    levels = [e.mood_level for e in entries]

    # No pyplot: this runs in worker threads
    fig = Figure(figsize=(8, 3.5))
    ax = fig.subplots()

    if entries:
        ax.plot(
            range(len(levels)), levels,
            color=LINE_COLOR, linewidth=2, marker="o", markersize=4,
        )
        step = max(len(labels) // 10, 1)
        ax.set_xticks(range(0, len(labels), step))
        ax.set_xticklabels(labels[::step], fontsize=8, rotation=30)
    else:
        ax.text(0.5, 0.5, "No mood entries yet", ha="center", va="center",
                fontsize=10, color="#6b7280", transform=ax.transAxes)
        ax.set_xticks([])

    ax.set_ylim(0.5, 5.5)
    ax.set_yticks([1, 2, 3, 4, 5])
    ax.set_ylabel("Mood", fontsize=9)
    ax.set_title("Mood History", fontsize=11, fontweight="bold", pad=10)
    ax.grid(axis="y", color=GRID_COLOR, linestyle="--", linewidth=0.8)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    buffer = io.BytesIO()
    fig.tight_layout()
    fig.savefig(buffer, format="png", dpi=150, bbox_inches="tight", facecolor="white")

    logger.info(f"Mood history chart rendered: {len(entries)} points")
    return buffer.getvalue()
