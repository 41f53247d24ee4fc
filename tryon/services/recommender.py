from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from ..schemas.size import Measurements, SizeRecommendation


SIZE_ORDER: List[str] = ["XS", "S", "M", "L", "XL", "XXL", "XXXL"]

CATEGORIES: Tuple[str, ...] = ("tops", "bottoms", "dresses", "outerwear")

# Used when a category has none of the measurements it needs
DEFAULT_SIZE = "M"
DEFAULT_CONFIDENCE = 0.6

INSEAM_BONUS = 0.05
INSEAM_BONUS_CAP = 0.95

# Layering room penalties for outerwear
OUTERWEAR_DUAL_FACTOR = 0.9
OUTERWEAR_SINGLE_FACTOR = 0.8

# (exclusive upper bound in cm, size, confidence); last row catches everything
Ladder = Sequence[Tuple[float, str, float]]


def _ladder(cuts: Sequence[float], confidences: Sequence[float]) -> Ladder:
    bounds = list(cuts) + [float("inf")]
    return tuple(zip(bounds, SIZE_ORDER, confidences))


TOPS_BUST: Ladder = _ladder(
    [82, 87, 93, 100, 107, 115],
    [0.80, 0.85, 0.90, 0.85, 0.80, 0.75, 0.70],
)

TOPS_SHOULDER: Ladder = _ladder(
    [36, 38, 40, 42, 44, 46],
    [0.70, 0.75, 0.80, 0.75, 0.70, 0.65, 0.60],
)

BOTTOMS_WAIST_HIPS: Ladder = _ladder(
    [75, 82, 90, 98, 106, 116],
    [0.85, 0.90, 0.90, 0.85, 0.80, 0.75, 0.70],
)

BOTTOMS_WAIST: Ladder = _ladder(
    [70, 76, 84, 92, 102, 112],
    [0.75, 0.80, 0.80, 0.75, 0.70, 0.65, 0.60],
)

BOTTOMS_HIPS: Ladder = _ladder(
    [80, 88, 96, 104, 112, 120],
    [0.70, 0.75, 0.75, 0.70, 0.65, 0.60, 0.55],
)

# Dress tiers share cut points; the two-measurement tier is 0.10 less confident
DRESS_CUTS: List[float] = [76, 82, 90, 98, 106, 116]

DRESSES_BUST_WAIST_HIPS: Ladder = _ladder(
    DRESS_CUTS,
    [0.85, 0.90, 0.90, 0.85, 0.80, 0.75, 0.70],
)

DRESSES_BUST_WAIST: Ladder = _ladder(
    DRESS_CUTS,
    [0.75, 0.80, 0.80, 0.75, 0.70, 0.65, 0.60],
)


def _present(value: Optional[float]) -> bool:
    # A zero reading is as good as no reading
    return bool(value)


def _scan(ladder: Ladder, value: float) -> Tuple[str, float]:
    for upper, size, confidence in ladder:
        if value < upper:
            return size, confidence
    # Only reachable for NaN
    _, size, confidence = ladder[-1]
    return size, confidence


def step_up(size: str) -> str:
    """Advance one step along SIZE_ORDER, staying at the largest size."""
    idx = SIZE_ORDER.index(size)
    return SIZE_ORDER[min(idx + 1, len(SIZE_ORDER) - 1)]


def _larger(a: str, b: str) -> str:
    return a if SIZE_ORDER.index(a) >= SIZE_ORDER.index(b) else b


def _tops(bust: Optional[float], shoulder_width: Optional[float]) -> Tuple[str, float]:
    if _present(bust):
        return _scan(TOPS_BUST, bust)
    if _present(shoulder_width):
        return _scan(TOPS_SHOULDER, shoulder_width)
    return DEFAULT_SIZE, DEFAULT_CONFIDENCE


def recommend_tops(m: Measurements) -> SizeRecommendation:
    """Bust decides; shoulder width is only consulted when bust is missing."""
    size, confidence = _tops(m.bust, m.shoulder_width)
    return SizeRecommendation(category="tops", recommended_size=size, confidence=confidence)


def recommend_bottoms(m: Measurements) -> SizeRecommendation:
    """Waist+hips average, then waist alone, then hips alone.

    Inseam never moves the size. It only adds a little confidence to the
    combined tier.
    """
    if _present(m.waist) and _present(m.hips):
        size, confidence = _scan(BOTTOMS_WAIST_HIPS, (m.waist + m.hips) / 2)
        if _present(m.inseam):
            confidence = min(confidence + INSEAM_BONUS, INSEAM_BONUS_CAP)
    elif _present(m.waist):
        size, confidence = _scan(BOTTOMS_WAIST, m.waist)
    elif _present(m.hips):
        size, confidence = _scan(BOTTOMS_HIPS, m.hips)
    else:
        size, confidence = DEFAULT_SIZE, DEFAULT_CONFIDENCE
    return SizeRecommendation(category="bottoms", recommended_size=size, confidence=confidence)


def recommend_dresses(m: Measurements) -> SizeRecommendation:
    if _present(m.bust) and _present(m.waist) and _present(m.hips):
        size, confidence = _scan(DRESSES_BUST_WAIST_HIPS, (m.bust + m.waist + m.hips) / 3)
    elif _present(m.bust) and _present(m.waist):
        size, confidence = _scan(DRESSES_BUST_WAIST, (m.bust + m.waist) / 2)
    elif _present(m.bust):
        size, confidence = _tops(m.bust, None)
    else:
        size, confidence = DEFAULT_SIZE, DEFAULT_CONFIDENCE
    return SizeRecommendation(category="dresses", recommended_size=size, confidence=confidence)


def recommend_outerwear(m: Measurements) -> SizeRecommendation:
    """Tops size plus one step of layering room.

    With both bust and shoulder width the larger of the two tops sizes is
    stepped up. The no-measurement default is returned as is.
    """
    has_bust = _present(m.bust)
    has_shoulder = _present(m.shoulder_width)
    if has_bust and has_shoulder:
        bust_size, bust_conf = _tops(m.bust, None)
        shoulder_size, shoulder_conf = _tops(None, m.shoulder_width)
        size = step_up(_larger(bust_size, shoulder_size))
        confidence = (bust_conf + shoulder_conf) / 2 * OUTERWEAR_DUAL_FACTOR
    elif has_bust or has_shoulder:
        base, base_conf = _tops(m.bust, m.shoulder_width)
        size = step_up(base)
        confidence = base_conf * OUTERWEAR_SINGLE_FACTOR
    else:
        size, confidence = DEFAULT_SIZE, DEFAULT_CONFIDENCE
    return SizeRecommendation(category="outerwear", recommended_size=size, confidence=confidence)


def recommend(measurements: Union[Measurements, Mapping[str, Any], None]) -> List[SizeRecommendation]:
    """Size recommendations for tops, bottoms, dresses and outerwear, in that order.

    Accepts a Measurements model or a plain mapping using either the
    camelCase or snake_case field names. Missing fields are never an error;
    an empty set yields the default size for every category.
    """
    if measurements is None:
        m = Measurements()
    elif isinstance(measurements, Measurements):
        m = measurements
    else:
        m = Measurements.model_validate(dict(measurements))
    return [
        recommend_tops(m),
        recommend_bottoms(m),
        recommend_dresses(m),
        recommend_outerwear(m),
    ]
