"""
Score policy for business tasks.

Every generator maps an age or a countdown onto a fixed table of score bands.
A band covers [previous bound, upper bound), so a value sitting exactly on a
threshold already scores in the next band. The one exception is a consultation
exactly a day old, which still scores as same-day. Policy overlays (the
viewed cap and the January deposit boost) are separate steps applied after the
base band so they can be tested and switched off on their own.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Literal

PriorityLevel = Literal["critical", "high", "medium", "low"]

MIN_SCORE = 0
MAX_SCORE = 1000

# (minimum score, level), checked top-down
PRIORITY_THRESHOLDS: tuple[tuple[int, PriorityLevel], ...] = (
    (800, "critical"),
    (500, "high"),
    (300, "medium"),
)

Bands = Sequence[tuple[float, int]]

NEW_CONSULTATION_BANDS: Bands = ((1, 950), (4, 850), (24, 650), (48, 450))
# A request exactly 24h old still scores 650
NEW_CONSULTATION_INCLUSIVE_BOUNDS = frozenset({24})
DEPOSIT_BANDS: Bands = ((24, 1000), (48, 900), (72, 750), (168, 550))
DEPOSIT_DEFAULT = 400
CONFIRMATION_BANDS: Bands = ((12, 980), (24, 880))
CONFIRMATION_DEFAULT = 680
FOLLOW_UP_BANDS: Bands = ((2, 650), (3, 550), (5, 450), (7, 350))
FOLLOW_UP_DEFAULT = 250
STALE_CONVERSATION_BANDS: Bands = ((3, 600), (4, 500), (6, 400), (8, 300))
STALE_CONVERSATION_DEFAULT = 200
STALE_CONVERSATION_FLOOR = 100
# Whole calendar days: today, then the next two days
BIRTHDAY_BANDS: Bands = ((1, 400), (3, 350))
BIRTHDAY_DEFAULT = 280
FIRST_ANNIVERSARY_SCORE = 420
LATER_ANNIVERSARY_SCORE = 320
HEALED_PHOTO_BANDS: Bands = ((18, 350), (25, 300))
HEALED_PHOTO_DEFAULT = 250
THANK_YOU_SCORE = 400

VIEWED_CAP_SCORE = 700
VIEWED_CAP_MIN_HOURS = 2
SEASONAL_BOOST_MONTHS = frozenset({1})  # post-holiday no-show risk
SEASONAL_BOOST_FACTOR = 1.2


def priority_level(score: int) -> PriorityLevel:
    for minimum, level in PRIORITY_THRESHOLDS:
        if score >= minimum:
            return level
    return "low"


def clamp_score(score: float) -> int:
    """Round to an integer inside [MIN_SCORE, MAX_SCORE]."""
    return max(MIN_SCORE, min(MAX_SCORE, int(round(score))))


def band_score(
    value: float, bands: Bands, default: int, inclusive: frozenset[float] = frozenset()
) -> int:
    """Score of the first band whose upper bound `value` is below (or on, if listed)."""
    for upper, score in bands:
        if value < upper or (value == upper and upper in inclusive):
            return score
    return default


def time_multiplier(hours_until_deadline: float) -> float:
    """
    Urgency multiplier for a deadline-bound task.

    Not composed into any of the current score tables; kept so new
    deadline-driven task types share the same urgency curve.
    """
    if hours_until_deadline < 0:
        return 0.5  # overdue
    if hours_until_deadline < 6:
        return 2.0
    if hours_until_deadline < 24:
        return 1.5
    if hours_until_deadline < 48:
        return 1.2
    if hours_until_deadline < 72:
        return 1.0
    return 0.8


# ---------------------------------------------------------------------------
# Base scores
# ---------------------------------------------------------------------------


def new_consultation_score(hours_since_created: float) -> int:
    score = band_score(
        hours_since_created,
        NEW_CONSULTATION_BANDS,
        default=-1,
        inclusive=NEW_CONSULTATION_INCLUSIVE_BOUNDS,
    )
    if score < 0:
        return clamp_score(max(100, 300 - 2 * hours_since_created))
    return score


def deposit_score(hours_until_start: float) -> int:
    return band_score(hours_until_start, DEPOSIT_BANDS, DEPOSIT_DEFAULT)


def confirmation_score(hours_until_start: float) -> int:
    return band_score(hours_until_start, CONFIRMATION_BANDS, CONFIRMATION_DEFAULT)


def follow_up_score(days_since_update: float) -> int:
    return band_score(days_since_update, FOLLOW_UP_BANDS, FOLLOW_UP_DEFAULT)


def stale_conversation_score(days_since_last_message: float) -> int:
    score = band_score(
        days_since_last_message, STALE_CONVERSATION_BANDS, STALE_CONVERSATION_DEFAULT
    )
    return max(STALE_CONVERSATION_FLOOR, score)


def birthday_score(days_until_birthday: int) -> int:
    return band_score(days_until_birthday, BIRTHDAY_BANDS, BIRTHDAY_DEFAULT)


def anniversary_score(years: int) -> int:
    return FIRST_ANNIVERSARY_SCORE if years == 1 else LATER_ANNIVERSARY_SCORE


def healed_photo_score(days_since_end: float) -> int:
    return band_score(days_since_end, HEALED_PHOTO_BANDS, HEALED_PHOTO_DEFAULT)


# ---------------------------------------------------------------------------
# Overlays
# ---------------------------------------------------------------------------


def apply_viewed_cap(score: int, viewed: bool, hours_since_created: float) -> int:
    """A request the provider opened but left unanswered stops climbing past 700."""
    if viewed and hours_since_created > VIEWED_CAP_MIN_HOURS:
        return min(score, VIEWED_CAP_SCORE)
    return score


def apply_seasonal_boost(score: int, now: datetime) -> int:
    if now.month in SEASONAL_BOOST_MONTHS:
        return clamp_score(score * SEASONAL_BOOST_FACTOR)
    return score
