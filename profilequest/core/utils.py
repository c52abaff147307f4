import math


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for positives (2.5 -> 3), unlike round()."""
    return int(math.floor(value + 0.5))


def normalize_title(title) -> str:
    return str(title or "").strip().lower()
