"""Rating checks shared by the book and review routes.

Books carry a whole-star rating (1-5) chosen when they are shelved.
Reviews accept half stars from 0.5 to 5. Values arrive straight from
JSON, so booleans are rejected even though Python treats them as ints,
and arbitrarily large numbers must fail the range check before any
float conversion.
"""
import math

MAX_STARS = 5


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_whole_star(value):
    # Range first: huge ints overflow float(); NaN fails every comparison
    if not _is_number(value) or not 1 <= value <= MAX_STARS:
        return False
    # 4.0 counts, JSON does not distinguish it from 4
    return float(value).is_integer()


def round_half_star(value):
    """Round to the nearest half star, halves going up (2.25 -> 2.5)."""
    return math.floor(value * 2 + 0.5) / 2


def is_half_star(value):
    # Anything outside [0.25, 5.25) rounds outside 0.5-5
    if not _is_number(value) or not 0.25 <= value < MAX_STARS + 0.25:
        return False
    return 0.5 <= round_half_star(value) <= MAX_STARS


def coerce_flag(value):
    """Return the value if it is a JSON boolean, otherwise None."""
    if value is True or value is False:
        return value
    return None
