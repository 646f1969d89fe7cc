from typing import Optional

import structlog

from . import config
from .golf_calc import round_half_up
from .holes import HoleIndex
from .schemas import Course, PlayerRound, Round

logger = structlog.get_logger(__name__)


def expected_nine_hole_score(player_round: PlayerRound, course: Optional[Course] = None) -> int:
    """
    Golpes esperados para los 9 hoyos no jugados.
    Con hándicap: par9 + hcp/2. Sin hándicap: par9 + penalización fija.
    """
    baseline = HoleIndex(course).front_nine_par(default=config.NINE_HOLE_PAR)

    if player_round.handicap_used is not None:
        return round_half_up(baseline + player_round.handicap_used / 2)

    return baseline + config.NO_HANDICAP_PENALTY


def eighteen_hole_equivalent(player_round: PlayerRound, round: Round, course: Optional[Course] = None) -> int:
    if round.inferred_hole_count == 18:
        return player_round.total_score

    expected = expected_nine_hole_score(player_round, course)
    # nunca por debajo de lo realmente jugado
    equivalent = player_round.total_score + max(expected, 0)

    logger.debug(
        "Nine hole round normalized",
        round_id=round.id,
        player_id=player_round.player_id,
        actual=player_round.total_score,
        equivalent=equivalent,
    )
    return equivalent


def eighteen_hole_equivalent_par(round: Round, course: Optional[Course] = None) -> int:
    if course is None:
        return config.NINE_HOLE_PAR * 2

    full_par = course.par_total or config.NINE_HOLE_PAR * 2
    if round.inferred_hole_count == 18:
        return full_par

    # 9 hoyos jugados + par estándar de los otros 9
    return HoleIndex(course).front_nine_par() + config.NINE_HOLE_PAR
