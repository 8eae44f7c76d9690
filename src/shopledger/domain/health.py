"""Business health score.

A deterministic 0-10 score built from profitability, consistency of
record keeping, expense control, momentum and daily target achievement.
The internal scale runs from 0 to 100 starting at a neutral 70; the result is
clamped and compressed to 0-10 in steps of 0.5.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from shopledger.domain.analytics import (
    expense_ratio,
    missing_entry_count,
    monthly_profit,
    today_profit,
    trend_7_day,
    weekly_growth,
)
from shopledger.domain.entities import Entry, HealthScoreResult

BASE_SCORE = 70

BAND_EXCELLENT = "excellent"
BAND_GOOD = "good"
BAND_WARNING = "warning"
BAND_CRITICAL = "critical"

# Message texts by key, so callers can substitute translations.
MESSAGES = {
    "excellent.growing": "Your business is in excellent health and growing. Keep it up.",
    "excellent.steady": "Your business is in excellent health. Keep up this pace.",
    "good.expenses": "Good. Keep an eye on expenses to improve your margins.",
    "good.steady": "Good trajectory. Stay disciplined with your record keeping.",
    "warning.missing": "Watch out. Record your activity every day.",
    "warning.expenses": "Warning: your expenses are too high. Cut costs.",
    "warning.declining": "The trend is negative. Review and adjust your strategy.",
    "warning.profit": "Watch out. Work on your profitability.",
    "critical.expenses": "Critical: expenses exceed revenue. Act now.",
    "critical.irregular": "Critical: irregular records and a negative trend. Take back control.",
    "critical.default": "Critical situation. Reassess your business strategy.",
}

INDICATORS = {
    BAND_EXCELLENT: "++",
    BAND_GOOD: "+",
    BAND_WARNING: "!",
    BAND_CRITICAL: "!!",
}


def score_band(score: float) -> str:
    """Return the band name of a 0-10 score."""
    if score >= 8.5:
        return BAND_EXCELLENT
    if score >= 6.5:
        return BAND_GOOD
    if score >= 4.5:
        return BAND_WARNING
    return BAND_CRITICAL


def score_indicator(score: float) -> str:
    """Short text marker of a score's band, for terse displays."""
    return INDICATORS[score_band(score)]


def _profitability_points(today_value: Decimal, month_value: Decimal) -> int:
    points = 0
    if today_value > 0:
        points += 5
    elif today_value < 0:
        points -= 15
    if month_value > 0:
        points += 10
    elif month_value < 0:
        points -= 20
    return points


def _consistency_points(missing: int) -> int:
    if missing == 0:
        return 10
    if missing == 1:
        return 5
    if missing >= 5:
        return -10
    return 0


def _expense_points(ratio: float) -> int:
    if ratio < 0.5:
        return 15
    if ratio < 0.7:
        return 5
    if ratio > 0.9:
        return -15
    return -5


def _momentum_points(trend: int, growth: float) -> int:
    points = 0
    if trend == 1:
        points += 10
    elif trend == -1:
        points -= 10
    if growth > 10:
        points += 5
    elif growth < -10:
        points -= 5
    return points


def _target_points(today_value: Decimal, daily_target: Optional[Decimal]) -> int:
    if daily_target is None or daily_target <= 0:
        return 0
    if today_value >= daily_target:
        return 10
    if today_value >= daily_target * Decimal("0.75"):
        return 5
    return 0


def compress_score(internal: int) -> float:
    """Clamp a 0-100 score and convert it to 0-10 rounded to the nearest 0.5."""
    clamped = max(0, min(100, internal))
    halves = (Decimal(clamped) / 100 * 10 * 2).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(halves) / 2


def health_message_key(score: float, trend: int, ratio: float, missing: int) -> str:
    """Pick the message for a score, refined by the underlying signals."""
    band = score_band(score)
    if band == BAND_EXCELLENT:
        return "excellent.growing" if trend == 1 else "excellent.steady"
    if band == BAND_GOOD:
        return "good.expenses" if ratio > 0.75 else "good.steady"
    if band == BAND_WARNING:
        if missing > 2:
            return "warning.missing"
        if ratio > 0.8:
            return "warning.expenses"
        if trend == -1:
            return "warning.declining"
        return "warning.profit"
    if ratio > 0.9:
        return "critical.expenses"
    if trend == -1 and missing > 3:
        return "critical.irregular"
    return "critical.default"


def health_score(
    entries: Iterable[Entry],
    daily_target: Optional[Decimal] = None,
    today: Optional[date] = None,
) -> HealthScoreResult:
    """Compute the business health score of an entry history.

    Args:
        entries: Entry history
        daily_target: Optional daily profit target
        today: Reference day (defaults to the current date)

    Returns:
        HealthScoreResult with a score in [0, 10], a multiple of 0.5
    """
    entries = list(entries)
    day = today if today is not None else date.today()

    today_value = today_profit(entries, day)
    missing = missing_entry_count(entries, 7, day)
    ratio = expense_ratio(entries, 7, day)
    trend = trend_7_day(entries, day)

    internal = (
        BASE_SCORE
        + _profitability_points(today_value, monthly_profit(entries, day))
        + _consistency_points(missing)
        + _expense_points(ratio)
        + _momentum_points(trend, weekly_growth(entries, day))
        + _target_points(today_value, daily_target)
    )
    score = compress_score(internal)
    key = health_message_key(score, trend, ratio, missing)
    return HealthScoreResult(
        score=score,
        message=MESSAGES[key],
        band=score_band(score),
        message_key=key,
    )
