import datetime

import pytest

from golf_core.analytics import (
    blow_up_rate,
    difficulty_tier,
    label_for_date,
    per_hole_averages,
    performance_by_difficulty,
    performance_by_par,
    player_summary,
    score_distribution,
    score_trend,
)

from .conftest import make_course, make_round, scores_for_total, scores_from_strokes

# vs par: +1, 0, 0, +2, 0, +3, +1, 0, 0
FRONT_NINE = [5, 4, 3, 7, 4, 7, 4, 4, 5]


@pytest.fixture
def front_nine_round():
    return make_round("r1", scores_from_strokes(FRONT_NINE))


def test_performance_by_par(course, front_nine_round) -> None:
    perf = performance_by_par("p1", [front_nine_round], [course])

    assert perf.par3 == pytest.approx(0.5)
    assert perf.par4 == pytest.approx(0.8)
    assert perf.par5 == pytest.approx(1.0)


def test_performance_by_par_empty_bucket_is_none(course) -> None:
    # solo pares 4 jugados
    r = make_round("r1", scores_from_strokes([4, 5]))
    perf = performance_by_par("p1", [r], [course])

    assert perf.par4 == pytest.approx(0.5)
    assert perf.par3 is None
    assert perf.par5 is None


def test_performance_by_par_exactly_on_par_is_zero_not_none(course) -> None:
    r = make_round("r1", scores_from_strokes([4, 4, 3]))
    perf = performance_by_par("p1", [r], [course])

    assert perf.par3 == 0
    assert perf.par3 is not None


def test_performance_by_par_without_rounds() -> None:
    perf = performance_by_par("p1", [], [])
    assert (perf.par3, perf.par4, perf.par5) == (None, None, None)


def test_performance_by_difficulty(course, front_nine_round) -> None:
    perf = performance_by_difficulty("p1", [front_nine_round], [course])

    assert perf.hard == pytest.approx(1.0)
    assert perf.medium == pytest.approx(1 / 3)
    assert perf.easy is None


def test_holes_without_rank_are_excluded(front_nine_round) -> None:
    course = make_course(ranked=False)

    perf = performance_by_difficulty("p1", [front_nine_round], [course])
    assert (perf.hard, perf.medium, perf.easy) == (None, None, None)

    # pero siguen contando por par
    assert performance_by_par("p1", [front_nine_round], [course]).par4 == pytest.approx(0.8)


@pytest.mark.parametrize("rank, tier", [(1, "hard"), (6, "hard"), (7, "medium"), (12, "medium"), (13, "easy"), (18, "easy"), (None, None)])
def test_difficulty_tier(rank, tier) -> None:
    assert difficulty_tier(rank) == tier


def test_blow_up_rate(course, front_nine_round) -> None:
    back_nine_only = make_course(course_id="c2", pars=[4] * 9)
    unresolved = make_round("r2", scores_from_strokes([9] * 9, first_hole=10), course_id="c2", day=2)
    missing_course = make_round("r3", scores_from_strokes([9] * 9), course_id="nope", day=3)

    rate = blow_up_rate("p1", [front_nine_round, unresolved, missing_course], [course, back_nine_only])

    assert rate.total_blow_ups == 1
    assert rate.rounds_considered == 1
    assert rate.average_per_round == 1.0


def test_blow_up_rate_is_total_over_rounds(course) -> None:
    rounds = [
        make_round("r1", scores_from_strokes([7, 7, 6])),   # 3 reventones
        make_round("r2", scores_from_strokes([4, 4, 3]), day=2),
    ]
    rate = blow_up_rate("p1", rounds, [course])

    assert rate.average_per_round == rate.total_blow_ups / rate.rounds_considered == 1.5


def test_blow_up_rate_without_rounds() -> None:
    rate = blow_up_rate("p1", [], [])

    assert rate.average_per_round == 0
    assert rate.rounds_considered == 0


def test_blow_up_rate_course_filter(course, front_nine_round) -> None:
    rate = blow_up_rate("p1", [front_nine_round], [course], course_id="other")
    assert rate.rounds_considered == 0


def test_score_trend_keeps_recent_rounds(course) -> None:
    rounds = [make_round(f"r{d}", scores_for_total(79 + d), day=d) for d in range(1, 13)]
    trend = score_trend("p1", list(reversed(rounds)), [course])

    assert trend.total_rounds == 10
    assert trend.scores == list(range(82, 92))
    assert trend.labels[0] == "Jan 3"
    assert trend.labels[-1] == "Jan 12"
    assert trend.moving_average[:5] == [82.0, 82.5, 83.0, 83.5, 84.0]
    assert trend.moving_average[5] == 85.0
    assert trend.moving_average[-1] == 89.0


def test_score_trend_window_never_larger_than_rounds(course) -> None:
    rounds = [make_round(f"r{i}", scores_for_total(t), day=i + 1) for i, t in enumerate([80, 90, 100])]
    trend = score_trend("p1", rounds, [course])

    assert trend.moving_average == [80.0, 85.0, 90.0]


def test_score_trend_window_never_smaller_than_two(course) -> None:
    rounds = [make_round(f"r{i}", scores_for_total(t), day=i + 1) for i, t in enumerate([80, 90, 100])]
    trend = score_trend("p1", rounds, [course], moving_average_window=1)

    assert trend.moving_average == [80.0, 85.0, 95.0]


def test_score_trend_average_ties_go_up(course) -> None:
    rounds = [make_round(f"r{i}", scores_for_total(t), day=i + 1) for i, t in enumerate([80, 81, 82, 82])]
    trend = score_trend("p1", rounds, [course])

    # 325 / 4 = 81.25
    assert trend.moving_average[-1] == 81.3


@pytest.mark.parametrize("day, label", [
    (datetime.date(2024, 1, 3), "Jan 3"),
    (datetime.date(2024, 5, 21), "May 21"),
    (datetime.date(2024, 12, 31), "Dec 31"),
])
def test_label_for_date(day, label) -> None:
    assert label_for_date(day) == label


def test_score_trend_normalizes_nine_hole_rounds() -> None:
    rounds = [make_round("r1", scores_for_total(45, holes=9), course_id="unknown")]
    trend = score_trend("p1", rounds, [])

    assert trend.scores == [85]
    assert trend.moving_average == [85.0]


def test_score_trend_without_rounds() -> None:
    trend = score_trend("p1", [], [])

    assert trend.total_rounds == 0
    assert trend.scores == []
    assert trend.labels == []


def test_per_hole_averages(course) -> None:
    rounds = [
        make_round("r1", scores_from_strokes([5, 4])),
        make_round("r2", scores_from_strokes([3]), day=2),
    ]
    averages = per_hole_averages("p1", rounds, course)

    assert averages[1].average == 4.0
    assert averages[1].attempts == 2
    assert averages[2].attempts == 1
    assert 3 not in averages


def test_score_distribution(course, front_nine_round) -> None:
    dist = score_distribution("p1", [front_nine_round], [course])

    assert dist["par"] == 5
    assert dist["bogey"] == 2
    assert dist["double"] == 1
    assert dist["worse"] == 1
    assert dist["birdie"] == 0


def test_player_summary(course) -> None:
    rounds = [
        make_round("r1", scores_for_total(80)),
        make_round("r2", scores_for_total(90), day=2),
    ]
    summary = player_summary("p1", rounds, [course])

    assert summary.rounds_played == 2
    assert summary.average_score == 85.0
    assert summary.average_vs_par == 13.0
    assert summary.best_score == 80
    assert summary.favorite_course_id == "c1"
    assert summary.handicap_index is None


def test_player_summary_without_rounds() -> None:
    summary = player_summary("p1", [], [])

    assert summary.rounds_played == 0
    assert summary.average_score is None
