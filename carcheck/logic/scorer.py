"""
Deterministic purchase score.

score_vehicle() starts from a neutral 50 and adds one bonus per factor,
then clamps to [0, 100]. No I/O, no randomness; the only clock read is the
current year, which callers can pin with `current_year`.
"""

from datetime import datetime
from typing import Dict, Optional, Sequence, Tuple

from carcheck.domains.cars.schemas import VehicleAttributes

BASELINE = 50
MIN_SCORE = 0
MAX_SCORE = 100

# (upper bound inclusive, bonus), checked in order
AGE_BONUSES: Sequence[Tuple[int, int]] = ((2, 20), (5, 15), (8, 10), (12, 5))
MILEAGE_BONUSES: Sequence[Tuple[int, int]] = ((20_000, 20), (50_000, 15), (100_000, 10), (150_000, 5))
PRICE_BONUSES: Sequence[Tuple[int, int]] = ((50_000, 20), (100_000, 15), (150_000, 10), (200_000, 5))

ELECTRIFIED_KEYWORDS = ("hybrid", "electric", "היברידי", "חשמלי")
DIESEL_KEYWORDS = ("diesel", "דיזל")


def _tiered(value: Optional[int], tiers: Sequence[Tuple[int, int]]) -> int:
    if value is None:
        return 0
    for bound, bonus in tiers:
        if value <= bound:
            return bonus
    return 0


def age_bonus(year: Optional[int], current_year: int) -> int:
    if not year:
        return 0
    return _tiered(current_year - year, AGE_BONUSES)


def mileage_bonus(mileage: Optional[int]) -> int:
    return _tiered(mileage, MILEAGE_BONUSES)


def ownership_bonus(owners: Optional[int]) -> int:
    # zero owners is treated like one so fewer owners never scores lower
    if owners is None:
        return 0
    if owners <= 1:
        return 10
    if owners == 2:
        return 5
    return 0


def price_bonus(price: Optional[int]) -> int:
    return _tiered(price, PRICE_BONUSES)


def engine_bonus(engine_type: Optional[str]) -> int:
    engine = (engine_type or "").lower()
    if any(k in engine for k in ELECTRIFIED_KEYWORDS):
        return 10
    if any(k in engine for k in DIESEL_KEYWORDS):
        return 5
    return 0


def score_breakdown(attrs: VehicleAttributes, current_year: Optional[int] = None) -> Dict[str, int]:
    """Per-factor bonuses, keyed by factor name."""
    year_now = current_year or datetime.now().year
    return {
        "baseline": BASELINE,
        "age": age_bonus(attrs.year, year_now),
        "mileage": mileage_bonus(attrs.mileage),
        "ownership": ownership_bonus(attrs.ownership),
        "price": price_bonus(attrs.price),
        "engine": engine_bonus(attrs.engine_type),
    }


def clamp_score(value: float) -> int:
    return int(max(MIN_SCORE, min(MAX_SCORE, round(value))))


def score_vehicle(attrs: VehicleAttributes, current_year: Optional[int] = None) -> int:
    """Score a vehicle from 0 to 100 using the fixed weighted rules."""
    return clamp_score(sum(score_breakdown(attrs, current_year).values()))
