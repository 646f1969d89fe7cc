"""Cálculos de golf: normalización de vueltas, hándicap, estadísticas y liquidación Nassau."""

from .analytics import (
    blow_up_rate,
    per_hole_averages,
    performance_by_difficulty,
    performance_by_par,
    player_summary,
    score_distribution,
    score_trend,
)
from .exceptions import GolfCoreError, SettlementImbalanceError
from .handicap import compute_handicap_index, handicap_from_differentials, handicap_progression
from .holes import HoleIndex
from .nassau_display import build_display_model
from .normalizer import eighteen_hole_equivalent
from .schemas import Course, Hole, PlayerRound, Round, Score
from .settlement import settle

__all__ = [
    "Course",
    "Hole",
    "HoleIndex",
    "PlayerRound",
    "Round",
    "Score",
    "eighteen_hole_equivalent",
    "compute_handicap_index",
    "handicap_from_differentials",
    "handicap_progression",
    "performance_by_par",
    "performance_by_difficulty",
    "blow_up_rate",
    "score_trend",
    "per_hole_averages",
    "score_distribution",
    "player_summary",
    "settle",
    "build_display_model",
    "GolfCoreError",
    "SettlementImbalanceError",
]
