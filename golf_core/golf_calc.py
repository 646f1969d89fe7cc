import math
from decimal import ROUND_HALF_UP, Decimal

from . import config
from .schemas import Course


def round_half_up(value: float) -> int:
    # 2.5 -> 3, -2.5 -> -3 (round() de Python redondea a par)
    if not math.isfinite(value):
        return 0
    eps = 1e-9
    if value >= 0:
        return int(math.floor(value + 0.5 + eps))
    return int(math.ceil(value - 0.5 - eps))


def round_one_decimal(value: float) -> float:
    # 8.25 -> 8.3, a una décima como se muestra
    if not math.isfinite(value):
        return value
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def course_handicap(hcp_exact: float, course: Course) -> int:
    # WHS: índice * (slope / 113) + (rating - par)
    par = course.par_total or 72
    ch = hcp_exact * (course.effective_slope / config.NEUTRAL_SLOPE) + (course.effective_rating - par)
    return round_half_up(ch)


def strokes_received_per_hole(ch: int, holes):
    """
    holes: lista Hole con difficulty_rank
    devuelve dict {hole_number: golpes_recibidos}
    """
    received = {h.number: 0 for h in holes}
    if ch <= 0 or not holes:
        return received

    # hoyos sin HCP van al final, por número
    ordered = sorted(
        holes,
        key=lambda h: (h.difficulty_rank is None, h.difficulty_rank or 0, h.number)
    )

    base = ch // len(ordered)
    extra = ch % len(ordered)

    for h in ordered:
        received[h.number] = base
    for i in range(extra):
        received[ordered[i].number] += 1

    return received


def classify_hole(strokes: int, par: int) -> str:
    if strokes == 1:
        return "hio"
    d = strokes - par
    if d <= -3: return "albatross"
    if d == -2: return "eagle"
    if d == -1: return "birdie"
    if d == 0: return "par"
    if d == 1: return "bogey"
    if d == 2: return "double"
    return "worse"
