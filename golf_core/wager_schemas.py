from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

SegmentName = Literal["front", "back", "overall"]
HoleSelection = Literal["18", "front_9", "back_9"]


class Participant(BaseModel):
    player_id: str
    name: str = "Player"


class BetSettings(BaseModel):
    bet_per_unit_cents: int = Field(default=0, ge=0)
    front_cents: Optional[int] = Field(default=None, ge=0)
    back_cents: Optional[int] = Field(default=None, ge=0)
    overall_cents: Optional[int] = Field(default=None, ge=0)


class GameSession(BaseModel):
    id: str
    game_type: str = "nassau"
    hole_selection: HoleSelection = "18"
    participants: list[Participant] = Field(default_factory=list)
    bet_settings: BetSettings = Field(default_factory=BetSettings)


class SegmentMatchResult(BaseModel):
    """Resultado tal cual llega del módulo de juego (sin validar)."""
    pairing_id: Optional[str] = None
    segment: Optional[str] = None
    context: Optional[str] = None
    side_a: list[str] = Field(default_factory=list)
    side_b: list[str] = Field(default_factory=list)
    holes_won_a: int = 0
    holes_won_b: int = 0
    tied_holes: int = 0
    winner: Optional[str] = None   # "A" | "B" | "tie"


# --- resultado validado: Win | Tie -----------------------------------------------

class _SegmentOutcomeBase(BaseModel):
    pairing_id: str
    segment: SegmentName
    context_label: str
    player_a: str
    player_b: str
    holes_won_a: int = Field(default=0, ge=0)
    holes_won_b: int = Field(default=0, ge=0)
    tied_holes: int = Field(default=0, ge=0)


class SegmentWin(_SegmentOutcomeBase):
    kind: Literal["win"] = "win"
    winner: str
    loser: str


class SegmentTie(_SegmentOutcomeBase):
    kind: Literal["tie"] = "tie"


SegmentOutcome = Union[SegmentWin, SegmentTie]


# --- dinero ----------------------------------------------------------------------

class LineItemTransaction(BaseModel):
    id: str
    from_player_id: str
    to_player_id: str
    amount_cents: int = Field(gt=0)
    segment: SegmentName
    pairing_id: str
    game_type: str = "nassau"


class PairwiseSettlement(BaseModel):
    pair_key: str
    player_a_id: str
    player_a_name: str
    player_b_id: str
    player_b_name: str
    from_player_id: str
    from_player_name: str
    to_player_id: str
    to_player_name: str
    amount_cents: int
    line_items: list[LineItemTransaction] = Field(default_factory=list)


class NetBalanceRow(BaseModel):
    player_id: str
    player_name: str
    net_cents: int


class Settlement(BaseModel):
    line_items: list[LineItemTransaction] = Field(default_factory=list)
    pairwise_settlements: list[PairwiseSettlement] = Field(default_factory=list)
    net_balances: list[NetBalanceRow] = Field(default_factory=list)
    excluded_count: int = 0

    @property
    def is_settled_up(self) -> bool:
        return not self.pairwise_settlements


# --- vista -----------------------------------------------------------------------

class StandingsRow(BaseModel):
    player_id: str
    label: str
    placement: str          # "1", "T1", "3"...
    is_winner: bool = False
    wins: int = 0
    losses: int = 0
    ties: int = 0

    @property
    def record(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"

    @property
    def segments_won(self) -> int:
        return self.wins


class PlayerSegmentCell(BaseModel):
    segment: SegmentName
    context_label: str
    result: Literal["W", "L", "T"]
    holes_won_for: int
    holes_won_against: int
    tied_holes: int


class PlayerMatchup(BaseModel):
    opponent_player_id: str
    opponent_name: str
    pairing_id: str
    segments: list[PlayerSegmentCell] = Field(default_factory=list)


class PlayerDetail(BaseModel):
    player_id: str
    player_name: str
    seg_record: str = "0-0-0"
    segments_won: int = 0
    matchups: list[PlayerMatchup] = Field(default_factory=list)


class NassauDisplayModel(BaseModel):
    is_round_robin: bool
    pairing_count: int
    segments_per_pairing: int
    total_segment_matches: int
    total_line_items: int
    total_to_settle_cents: int
    gross_matched_cents: int
    wager_summary: Optional[str] = None
    standings_winner_text: Optional[str] = None
    standings_columns: dict[str, str] = Field(default_factory=lambda: {
        "metric_a": "SEGMENTS (W-L-T)",
        "metric_b": "SEGMENTS WON",
    })
    standings: list[StandingsRow] = Field(default_factory=list)
    player_details: list[PlayerDetail] = Field(default_factory=list)
    pairwise_settlements: list[PairwiseSettlement] = Field(default_factory=list)
    net_balances: list[NetBalanceRow] = Field(default_factory=list)
    line_items: list[LineItemTransaction] = Field(default_factory=list)
