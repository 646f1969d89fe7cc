import datetime

import pytest

from golf_core.schemas import Course, Hole, PlayerRound, Round, Score
from golf_core.wager_schemas import BetSettings, GameSession, Participant, SegmentMatchResult

STANDARD_PARS = [4, 4, 3, 5, 4, 4, 3, 4, 5, 4, 4, 3, 5, 4, 4, 3, 4, 5]


def make_course(course_id="c1", pars=None, ranked=True, rating=None, slope=None, first_hole=1):
    pars = pars or STANDARD_PARS
    holes = [
        Hole(
            number=first_hole + i,
            par=par,
            yardage=350,
            difficulty_rank=(first_hole + i) if ranked else None,
        )
        for i, par in enumerate(pars)
    ]
    return Course(id=course_id, name=f"Course {course_id}", holes=holes, rating=rating, slope=slope)


def scores_for_total(total, holes=18, first_hole=1):
    base, extra = divmod(total, holes)
    return [
        Score(hole_number=first_hole + i, strokes=base + (1 if i < extra else 0))
        for i in range(holes)
    ]


def scores_from_strokes(strokes, first_hole=1):
    return [Score(hole_number=first_hole + i, strokes=s) for i, s in enumerate(strokes)]


def make_round(round_id, scores, course_id="c1", day=1, player_id="p1", handicap_used=None, hole_count=None, month=1):
    return Round(
        id=round_id,
        course_id=course_id,
        date=datetime.date(2024, month, day),
        players=[PlayerRound(player_id=player_id, scores=scores, handicap_used=handicap_used)],
        hole_count=hole_count,
    )


def match_result(pairing_id, segment, winner, a, b, context=None, won_a=0, won_b=0, tied=0):
    return SegmentMatchResult(
        pairing_id=pairing_id,
        segment=segment,
        context=context,
        side_a=[a],
        side_b=[b],
        holes_won_a=won_a,
        holes_won_b=won_b,
        tied_holes=tied,
        winner=winner,
    )


@pytest.fixture
def course():
    return make_course()


@pytest.fixture
def unrated_course():
    # sin rating ni slope: 72 / 113 por defecto
    return make_course(course_id="unrated")


@pytest.fixture
def two_player_session():
    return GameSession(
        id="s1",
        participants=[Participant(player_id="A", name="Ann"), Participant(player_id="B", name="Bob")],
        bet_settings=BetSettings(bet_per_unit_cents=500),
    )


@pytest.fixture
def three_player_session():
    return GameSession(
        id="s3",
        participants=[
            Participant(player_id="A", name="Ann"),
            Participant(player_id="B", name="Bob"),
            Participant(player_id="C", name="Cal"),
        ],
        bet_settings=BetSettings(bet_per_unit_cents=500),
    )


@pytest.fixture
def round_robin_results():
    return [
        match_result("A_vs_B", "front", "A", "A", "B", won_a=3, won_b=1, tied=5),
        match_result("A_vs_B", "back", "A", "A", "B", won_a=2, won_b=1, tied=6),
        match_result("A_vs_B", "overall", "A", "A", "B", won_a=5, won_b=2, tied=11),
        match_result("A_vs_C", "front", "B", "A", "C"),
        match_result("A_vs_C", "back", "A", "A", "C"),
        match_result("A_vs_C", "overall", "B", "A", "C"),
        match_result("B_vs_C", "front", "tie", "B", "C"),
        match_result("B_vs_C", "back", "A", "B", "C"),
        match_result("B_vs_C", "overall", "A", "B", "C"),
    ]
