"""
Índice de hándicap a partir del historial de vueltas.

El diferencial de cada vuelta es (score ajustado - rating) * 113 / slope,
con el score ajustado a 18 hoyos. El índice es la media de los mejores
min(8, floor(0.4 * n)) diferenciales.
"""
import datetime
import math
from typing import Optional

import structlog
from pydantic import BaseModel

from . import config
from .golf_calc import round_one_decimal
from .normalizer import eighteen_hole_equivalent
from .schemas import Course, Round, courses_by_id

logger = structlog.get_logger(__name__)


class RoundDifferential(BaseModel):
    round_id: str
    course_id: str
    date: datetime.date
    adjusted_score: int
    rating: float
    slope: int
    differential: float


class HandicapPoint(BaseModel):
    round_id: str
    date: datetime.date
    differential: float
    index_after: Optional[float] = None


def calculate_differential(adjusted_score: float, rating: float, slope: int) -> float:
    return (adjusted_score - rating) * config.NEUTRAL_SLOPE / slope


def differentials_used(count: int) -> int:
    return min(config.MAX_DIFFERENTIALS_USED, int(math.floor(0.4 * count)))


def handicap_from_differentials(diffs) -> Optional[float]:
    n = differentials_used(len(diffs))
    if n == 0:
        return None

    best = sorted(diffs)[:n]
    # precisión completa hasta el último paso
    return round_one_decimal(sum(best) / n)


def round_differentials(player_id: str, rounds, courses) -> list[RoundDifferential]:
    course_map = courses_by_id(courses)
    out = []

    for r in rounds:
        pr = r.player(player_id)
        if pr is None:
            continue

        course = course_map.get(r.course_id)
        if course is None:
            logger.debug("Skipping round without course", round_id=r.id, course_id=r.course_id)
            continue

        adjusted = eighteen_hole_equivalent(pr, r, course)
        rating = course.effective_rating
        slope = course.effective_slope

        out.append(RoundDifferential(
            round_id=r.id,
            course_id=course.id,
            date=r.date,
            adjusted_score=adjusted,
            rating=rating,
            slope=slope,
            differential=calculate_differential(adjusted, rating, slope),
        ))

    return out


def compute_handicap_index(player_id: str, rounds: list[Round], courses: list[Course]) -> Optional[float]:
    diffs = [d.differential for d in round_differentials(player_id, rounds, courses)]

    if len(diffs) < config.MIN_HANDICAP_ROUNDS:
        logger.debug("Not enough rounds for handicap", player_id=player_id, rounds=len(diffs))
        return None

    return handicap_from_differentials(diffs)


def handicap_progression(player_id: str, rounds: list[Round], courses: list[Course]) -> list[HandicapPoint]:
    """Serie cronológica: índice tras cada vuelta (None hasta tener el mínimo)."""
    diffs = sorted(
        round_differentials(player_id, rounds, courses),
        key=lambda d: (d.date, d.round_id)
    )

    series = []
    for i, d in enumerate(diffs):
        window = [x.differential for x in diffs[:i + 1]]
        index_after = None
        if len(window) >= config.MIN_HANDICAP_ROUNDS:
            index_after = handicap_from_differentials(window)

        series.append(HandicapPoint(
            round_id=d.round_id,
            date=d.date,
            differential=round_one_decimal(d.differential),
            index_after=index_after,
        ))

    return series
