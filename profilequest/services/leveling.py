import math
from dataclasses import dataclass
from typing import Tuple

from profilequest.core.errors import InvalidAmount

BASE_LEVEL = 1
BASE_THRESHOLD = 100


@dataclass(frozen=True)
class LevelState:
    level: int
    xp: int
    next_level_xp: int

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "xp": self.xp,
            "next_level_xp": self.next_level_xp,
        }


def ensure_amount(value) -> int:
    """
    Validates an XP total/amount and returns it as an int.
    Floats are accepted only when finite and integral (e.g. 150.0).
    """
    if isinstance(value, bool):
        raise InvalidAmount(value, "booleans are not XP amounts")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidAmount(value, "must be finite")
        if not value.is_integer():
            raise InvalidAmount(value, "must be a whole number")
        value = int(value)
    if not isinstance(value, int):
        raise InvalidAmount(value, "must be an integer")
    if value < 0:
        raise InvalidAmount(value, "must not be negative")
    return value


def next_threshold(threshold: int) -> int:
    """threshold * 1.5, rounded half up (337.5 -> 338)."""
    return (threshold * 3 + 1) // 2


def compute_level(total_xp) -> LevelState:
    """
    Reduces a total XP counter through the threshold series.

    compute_level(0)   -> LevelState(level=1, xp=0, next_level_xp=100)
    compute_level(100) -> LevelState(level=2, xp=0, next_level_xp=150)
    """
    xp = ensure_amount(total_xp)
    level = BASE_LEVEL
    threshold = BASE_THRESHOLD

    while xp >= threshold:
        xp -= threshold
        level += 1
        threshold = next_threshold(threshold)

    return LevelState(level=level, xp=xp, next_level_xp=threshold)


def cumulative_xp_for_level(level) -> int:
    """Total XP needed to reach `level` from level 1 (sum of thresholds 1..level-1)."""
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidAmount(level, "level must be an integer")
    if level < BASE_LEVEL:
        raise InvalidAmount(level, "level must be at least 1")

    total = 0
    threshold = BASE_THRESHOLD
    for _ in range(BASE_LEVEL, level):
        total += threshold
        threshold = next_threshold(threshold)
    return total


def threshold_for_level(level) -> int:
    """XP required to go from `level` to `level + 1`."""
    return compute_level(cumulative_xp_for_level(level)).next_level_xp


def total_xp_for(level, xp) -> int:
    """Recovers a total from a stored (level, xp-within-level) pair."""
    xp = ensure_amount(xp)
    if xp >= threshold_for_level(level):
        raise InvalidAmount(xp, f"exceeds the threshold of level {level}")
    return cumulative_xp_for_level(level) + xp


def apply_xp(total_xp, amount) -> Tuple[int, LevelState, int]:
    """
    Adds `amount` to `total_xp`.
    Returns (new_total, new_state, levels_gained).
    """
    total_xp = ensure_amount(total_xp)
    amount = ensure_amount(amount)

    before = compute_level(total_xp)
    new_total = total_xp + amount
    after = compute_level(new_total)
    return new_total, after, after.level - before.level
