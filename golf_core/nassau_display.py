from typing import Optional

import structlog

from .settlement import (
    segment_amount_cents,
    segment_order,
    segments_for_selection,
    settle_outcomes,
    validate_results,
)
from .wager_schemas import (
    BetSettings,
    GameSession,
    NassauDisplayModel,
    Participant,
    PlayerDetail,
    PlayerMatchup,
    PlayerSegmentCell,
    SegmentWin,
    StandingsRow,
)

logger = structlog.get_logger(__name__)

SEGMENT_LABELS = {"front": "Front 9", "back": "Back 9", "overall": "Overall"}


def format_cents(cents: int) -> str:
    # sin floats: $12.50 / -$3.00
    sign = "-" if cents < 0 else ""
    dollars, rest = divmod(abs(int(cents)), 100)
    return f"{sign}${dollars}.{rest:02d}"


def segment_label(segment: str) -> str:
    return SEGMENT_LABELS.get(segment, segment)


def wager_summary(bet_settings: BetSettings, segments) -> Optional[str]:
    parts = [
        f"{segment_label(s)} {format_cents(segment_amount_cents(bet_settings, s))}"
        for s in segments
    ]
    return " • ".join(parts) if parts else None


# ---------------------------------------------------------------------------------
# ---------------------------------- clasificación --------------------------------
# ---------------------------------------------------------------------------------

def build_standings(participants: list[Participant], outcomes) -> list[StandingsRow]:
    """
    Segmentos ganados / perdidos / empatados por jugador.
    Los empatados en cabeza son todos ganadores (se reparten el primer puesto).
    """
    stats = {p.player_id: {"wins": 0, "losses": 0, "ties": 0} for p in participants}
    names = {p.player_id: p.name for p in participants}

    for o in outcomes:
        for pid in (o.player_a, o.player_b):
            stats.setdefault(pid, {"wins": 0, "losses": 0, "ties": 0})

        if isinstance(o, SegmentWin):
            stats[o.winner]["wins"] += 1
            stats[o.loser]["losses"] += 1
        else:
            stats[o.player_a]["ties"] += 1
            stats[o.player_b]["ties"] += 1

    ordered = sorted(
        stats.items(),
        key=lambda kv: (-kv[1]["wins"], kv[1]["losses"], names.get(kv[0], "Player"), kv[0])
    )

    rows = []
    for pid, s in ordered:
        position = 1 + sum(1 for _, other in ordered if other["wins"] > s["wins"])
        shared = sum(1 for _, other in ordered if other["wins"] == s["wins"]) > 1
        rows.append(StandingsRow(
            player_id=pid,
            label=names.get(pid, "Player"),
            placement=f"T{position}" if shared else str(position),
            is_winner=position == 1 and bool(outcomes),
            wins=s["wins"],
            losses=s["losses"],
            ties=s["ties"],
        ))

    return rows


def standings_winner_text(rows: list[StandingsRow], segment_total: int) -> Optional[str]:
    winners = [r for r in rows if r.is_winner]
    if not winners:
        return None

    if len(winners) == 1:
        best = winners[0]
        return f"{best.label} leads Nassau segments with {best.segments_won}/{segment_total}."

    return f"Tied leaders in Nassau segments: {', '.join(w.label for w in winners)}."


# ---------------------------------------------------------------------------------
# ------------------------------ desglose por jugador -----------------------------
# ---------------------------------------------------------------------------------

def _cell(outcome, is_a: bool) -> PlayerSegmentCell:
    if isinstance(outcome, SegmentWin):
        me = outcome.player_a if is_a else outcome.player_b
        result = "W" if outcome.winner == me else "L"
    else:
        result = "T"

    won_a, won_b = outcome.holes_won_a, outcome.holes_won_b
    return PlayerSegmentCell(
        segment=outcome.segment,
        context_label=outcome.context_label or segment_label(outcome.segment),
        result=result,
        holes_won_for=won_a if is_a else won_b,
        holes_won_against=won_b if is_a else won_a,
        tied_holes=outcome.tied_holes,
    )


def build_player_details(participants: list[Participant], outcomes, standings: list[StandingsRow]) -> list[PlayerDetail]:
    names = {p.player_id: p.name for p in participants}
    row_by_player = {r.player_id: r for r in standings}

    # jugador -> rival -> PlayerMatchup
    matchups: dict[str, dict[str, PlayerMatchup]] = {}

    for o in outcomes:
        for me, rival, is_a in ((o.player_a, o.player_b, True), (o.player_b, o.player_a, False)):
            by_rival = matchups.setdefault(me, {})
            if rival not in by_rival:
                by_rival[rival] = PlayerMatchup(
                    opponent_player_id=rival,
                    opponent_name=names.get(rival, "Player"),
                    pairing_id=o.pairing_id,
                )
            by_rival[rival].segments.append(_cell(o, is_a))

    details = []
    for p in participants:
        mine = sorted(
            matchups.get(p.player_id, {}).values(),
            key=lambda m: (m.opponent_name, m.opponent_player_id)
        )
        for m in mine:
            m.segments.sort(key=lambda c: segment_order(c.segment))

        row = row_by_player.get(p.player_id)
        details.append(PlayerDetail(
            player_id=p.player_id,
            player_name=p.name,
            seg_record=row.record if row else "0-0-0",
            segments_won=row.segments_won if row else 0,
            matchups=mine,
        ))

    return sorted(details, key=lambda d: (-d.segments_won, d.player_name))


# ---------------------------------------------------------------------------------
# ------------------------------------ vista --------------------------------------
# ---------------------------------------------------------------------------------

def build_display_model(session: GameSession, raw_results) -> Optional[NassauDisplayModel]:
    if session.game_type != "nassau":
        logger.debug("Not a Nassau session", session_id=session.id, game_type=session.game_type)
        return None

    segments = segments_for_selection(session.hole_selection)
    outcomes, _ = validate_results(raw_results, segments)
    settlement = settle_outcomes(session, outcomes)

    standings = build_standings(session.participants, outcomes)
    segment_total = len(segments) * max(1, len(session.participants) - 1)

    pairing_count = len({o.pairing_id for o in outcomes})

    return NassauDisplayModel(
        is_round_robin=pairing_count > 1,
        pairing_count=pairing_count,
        segments_per_pairing=len(segments),
        total_segment_matches=pairing_count * len(segments),
        total_line_items=len(settlement.line_items),
        total_to_settle_cents=sum(s.amount_cents for s in settlement.pairwise_settlements),
        gross_matched_cents=sum(tx.amount_cents for tx in settlement.line_items),
        wager_summary=wager_summary(session.bet_settings, segments),
        standings_winner_text=standings_winner_text(standings, segment_total),
        standings=standings,
        player_details=build_player_details(session.participants, outcomes, standings),
        pairwise_settlements=settlement.pairwise_settlements,
        net_balances=settlement.net_balances,
        line_items=settlement.line_items,
    )
