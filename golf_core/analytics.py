from collections import Counter, defaultdict
from typing import Optional

import structlog
from pydantic import BaseModel, Field

from . import config
from .golf_calc import classify_hole, round_one_decimal
from .handicap import compute_handicap_index
from .holes import HoleIndex
from .normalizer import eighteen_hole_equivalent, eighteen_hole_equivalent_par
from .schemas import Course, Round, courses_by_id

logger = structlog.get_logger(__name__)

DIFFICULTY_TIERS = (
    ("hard", 1, 6),
    ("medium", 7, 12),
    ("easy", 13, 18),
)

BLOW_UP_OVER_PAR = 3   # triple bogey o peor


class PerformanceByPar(BaseModel):
    par3: Optional[float] = None
    par4: Optional[float] = None
    par5: Optional[float] = None


class PerformanceByDifficulty(BaseModel):
    hard: Optional[float] = None
    medium: Optional[float] = None
    easy: Optional[float] = None


class BlowUpRate(BaseModel):
    average_per_round: float = 0
    total_blow_ups: int = 0
    rounds_considered: int = 0


class ScoreTrend(BaseModel):
    labels: list[str] = Field(default_factory=list)
    scores: list[int] = Field(default_factory=list)
    moving_average: list[float] = Field(default_factory=list)
    total_rounds: int = 0


class HoleAverage(BaseModel):
    average: float
    attempts: int


class PlayerSummary(BaseModel):
    rounds_played: int = 0
    average_score: Optional[float] = None
    average_vs_par: Optional[float] = None
    handicap_index: Optional[float] = None
    best_score: Optional[int] = None
    favorite_course_id: Optional[str] = None
    distribution: dict[str, int] = Field(default_factory=dict)


# ---------------------------------------------------------------------------------
# ----------------------------------- helpers -------------------------------------
# ---------------------------------------------------------------------------------

def _player_rounds(player_id, rounds, course_id=None):
    for r in rounds:
        if course_id and r.course_id != course_id:
            continue
        pr = r.player(player_id)
        if pr is not None:
            yield r, pr


def _resolved_holes(player_id, rounds, courses, course_id=None):
    """
    Recorre (round, score, hole) de las vueltas del jugador cuyo campo existe.
    Los hoyos que no están en el campo se saltan.
    """
    course_map = courses_by_id(courses)

    for r, pr in _player_rounds(player_id, rounds, course_id):
        course = course_map.get(r.course_id)
        if course is None:
            logger.debug("Skipping round without course", round_id=r.id, course_id=r.course_id)
            continue

        idx = HoleIndex(course)
        for s in pr.scores:
            hole = idx.get(s.hole_number)
            if hole is None:
                continue
            yield r, s, hole


def _mean(total, count):
    return total / count if count else None


MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def label_for_date(d) -> str:
    # "Mar 5", en inglés sea cual sea el locale
    return f"{MONTH_ABBR[d.month - 1]} {d.day}"


# ---------------------------------------------------------------------------------
# ------------------------------- agregaciones ------------------------------------
# ---------------------------------------------------------------------------------

def performance_by_par(player_id: str, rounds: list[Round], courses: list[Course], course_id: str | None = None) -> PerformanceByPar:
    totals = {3: [0, 0], 4: [0, 0], 5: [0, 0]}   # par -> [suma vs par, hoyos]

    for _, s, hole in _resolved_holes(player_id, rounds, courses, course_id):
        bucket = totals.get(hole.par)
        if bucket is None:
            continue
        bucket[0] += s.strokes - hole.par
        bucket[1] += 1

    return PerformanceByPar(
        par3=_mean(*totals[3]),
        par4=_mean(*totals[4]),
        par5=_mean(*totals[5]),
    )


def difficulty_tier(rank: Optional[int]) -> Optional[str]:
    if rank is None:
        return None
    for name, lo, hi in DIFFICULTY_TIERS:
        if lo <= rank <= hi:
            return name
    return None


def performance_by_difficulty(player_id: str, rounds: list[Round], courses: list[Course], course_id: str | None = None) -> PerformanceByDifficulty:
    buckets = {name: [0, 0] for name, _, _ in DIFFICULTY_TIERS}

    for _, s, hole in _resolved_holes(player_id, rounds, courses, course_id):
        tier = difficulty_tier(hole.difficulty_rank)
        if tier is None:
            continue
        buckets[tier][0] += s.strokes - hole.par
        buckets[tier][1] += 1

    return PerformanceByDifficulty(**{name: _mean(*b) for name, b in buckets.items()})


def blow_up_rate(player_id: str, rounds: list[Round], courses: list[Course], course_id: str | None = None) -> BlowUpRate:
    blow_ups = 0
    considered = set()

    for r, s, hole in _resolved_holes(player_id, rounds, courses, course_id):
        considered.add(r.id)
        if s.strokes >= hole.par + BLOW_UP_OVER_PAR:
            blow_ups += 1

    n = len(considered)
    return BlowUpRate(
        average_per_round=blow_ups / n if n else 0,
        total_blow_ups=blow_ups,
        rounds_considered=n,
    )


def score_trend(
    player_id: str,
    rounds: list[Round],
    courses: list[Course],
    max_rounds: int = config.TREND_MAX_ROUNDS,
    moving_average_window: int = config.TREND_WINDOW,
    course_id: str | None = None,
) -> ScoreTrend:
    course_map = courses_by_id(courses)

    items = []
    for r, pr in _player_rounds(player_id, rounds, course_id):
        score = eighteen_hole_equivalent(pr, r, course_map.get(r.course_id))
        items.append((r.date, r.id, score))

    items.sort(key=lambda x: (x[0], x[1]))
    recent = items[-max_rounds:] if max_rounds > 0 else []

    scores = [score for _, _, score in recent]
    window = max(2, min(moving_average_window, len(scores)))

    moving = []
    for i in range(len(scores)):
        chunk = scores[max(0, i - window + 1):i + 1]
        moving.append(round_one_decimal(sum(chunk) / len(chunk)))

    return ScoreTrend(
        labels=[label_for_date(d) for d, _, _ in recent],
        scores=scores,
        moving_average=moving,
        total_rounds=len(recent),
    )


def per_hole_averages(player_id: str, rounds: list[Round], course: Course) -> dict[int, HoleAverage]:
    agg = defaultdict(lambda: [0, 0])

    for _, s, hole in _resolved_holes(player_id, rounds, [course], course.id):
        agg[hole.number][0] += s.strokes
        agg[hole.number][1] += 1

    return {
        number: HoleAverage(average=total / count, attempts=count)
        for number, (total, count) in sorted(agg.items())
    }


def score_distribution(player_id: str, rounds: list[Round], courses: list[Course], course_id: str | None = None) -> dict[str, int]:
    stats = Counter({
        "hio": 0, "albatross": 0, "eagle": 0, "birdie": 0,
        "par": 0, "bogey": 0, "double": 0, "worse": 0,
    })
    for _, s, hole in _resolved_holes(player_id, rounds, courses, course_id):
        stats[classify_hole(s.strokes, hole.par)] += 1
    return dict(stats)


def player_summary(player_id: str, rounds: list[Round], courses: list[Course]) -> PlayerSummary:
    course_map = courses_by_id(courses)

    played = list(_player_rounds(player_id, rounds))
    if not played:
        return PlayerSummary(distribution=score_distribution(player_id, rounds, courses))

    equivalents = []
    vs_par = []
    course_counts = Counter()

    for r, pr in played:
        course = course_map.get(r.course_id)
        eq = eighteen_hole_equivalent(pr, r, course)
        equivalents.append(eq)
        course_counts[r.course_id] += 1
        if course is not None:
            vs_par.append(eq - eighteen_hole_equivalent_par(r, course))

    # en empate gana el campo visto primero
    favorite = course_counts.most_common(1)[0][0]

    return PlayerSummary(
        rounds_played=len(played),
        average_score=round_one_decimal(sum(equivalents) / len(equivalents)),
        average_vs_par=round_one_decimal(sum(vs_par) / len(vs_par)) if vs_par else None,
        handicap_index=compute_handicap_index(player_id, rounds, courses),
        best_score=min(equivalents),
        favorite_course_id=favorite,
        distribution=score_distribution(player_id, rounds, courses),
    )
