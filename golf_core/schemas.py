import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, PrivateAttr, computed_field, model_validator

from . import config


class Hole(BaseModel):
    number: int = Field(ge=1, le=18)
    par: int = Field(ge=3, le=5)
    yardage: int = Field(default=0, ge=0)
    difficulty_rank: Optional[int] = Field(default=None, ge=1, le=18)   # HCP hoyo, 1 = más difícil


class Course(BaseModel):
    id: str
    name: str
    holes: list[Hole] = Field(default_factory=list)
    rating: Optional[float] = None
    slope: Optional[int] = None

    @property
    def par_total(self) -> int:
        return sum(h.par for h in self.holes)

    @property
    def effective_rating(self) -> float:
        if self.rating is not None:
            return self.rating
        # sin hoyos cargados no hay par que sumar
        return float(self.par_total or 72)

    @property
    def effective_slope(self) -> int:
        return self.slope if self.slope else config.NEUTRAL_SLOPE


class Score(BaseModel):
    hole_number: int = Field(ge=1, le=18)
    strokes: int = Field(ge=1)
    putts: Optional[int] = None
    fairway_hit: Optional[bool] = None
    green_in_regulation: Optional[bool] = None


class PlayerRound(BaseModel):
    player_id: str
    scores: list[Score] = Field(default_factory=list)
    handicap_used: Optional[float] = None
    net_score: Optional[float] = None

    _stored_total: Optional[int] = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def check_stored_total(cls, data, handler):
        """
        total_score siempre se recalcula a partir de scores.
        Si viene un total guardado (p.ej. columna de BD) se valida primero
        el resto del registro y después tiene que cuadrar.
        """
        stored = None
        if isinstance(data, dict) and "total_score" in data:
            data = dict(data)
            stored = data.pop("total_score")

        pr = handler(data)

        if stored is not None:
            pr._stored_total = int(stored)
            if pr._stored_total != pr.total_score:
                raise ValueError(
                    f"stored total_score {stored} does not match sum of strokes {pr.total_score}"
                )
        return pr

    @computed_field
    @property
    def total_score(self) -> int:
        return sum(s.strokes for s in self.scores)


class Round(BaseModel):
    id: str
    course_id: str
    date: datetime.date
    players: list[PlayerRound] = Field(default_factory=list)
    hole_count: Optional[Literal[9, 18]] = None

    def player(self, player_id: str) -> Optional[PlayerRound]:
        for pr in self.players:
            if pr.player_id == player_id:
                return pr
        return None

    def has_player(self, player_id: str) -> bool:
        return self.player(player_id) is not None

    @property
    def inferred_hole_count(self) -> int:
        if self.hole_count is not None:
            return self.hole_count

        first = self.players[0] if self.players else None
        if not first or not first.scores:
            return 18

        max_hole = max(s.hole_number for s in first.scores)
        return 9 if max_hole <= 9 else 18


def courses_by_id(courses) -> dict[str, Course]:
    return {c.id: c for c in courses or []}
