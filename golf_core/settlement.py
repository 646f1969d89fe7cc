"""
Liquidación de apuestas Nassau.

Resultados por segmento y emparejamiento -> movimientos (line items) con signo
-> neteo por pareja -> saldo neto por jugador. Todo en céntimos enteros.
"""
from collections import defaultdict
from typing import Optional

import structlog
from pydantic import ValidationError

from .exceptions import SettlementImbalanceError
from .wager_schemas import (
    BetSettings,
    GameSession,
    LineItemTransaction,
    NetBalanceRow,
    PairwiseSettlement,
    Participant,
    SegmentMatchResult,
    SegmentOutcome,
    SegmentTie,
    SegmentWin,
    Settlement,
)

logger = structlog.get_logger(__name__)

SEGMENT_ORDER = {"front": 0, "back": 1, "overall": 2}


def segments_for_selection(hole_selection: str) -> list[str]:
    if hole_selection == "front_9":
        return ["front"]
    if hole_selection == "back_9":
        return ["back"]
    return ["front", "back", "overall"]


def segment_order(segment: str) -> int:
    return SEGMENT_ORDER.get(segment, 3)


def segment_amount_cents(bet_settings: BetSettings, segment: str) -> int:
    unit = bet_settings.bet_per_unit_cents
    if segment == "front":
        return bet_settings.front_cents if bet_settings.front_cents is not None else unit
    if segment == "back":
        return bet_settings.back_cents if bet_settings.back_cents is not None else unit
    # el total vale doble salvo que se indique otra cosa
    return bet_settings.overall_cents if bet_settings.overall_cents is not None else unit * 2


def pair_key(a: str, b: str) -> str:
    first, second = sorted((a, b))
    return f"{first}|{second}"


def transaction_id(session_id: str, pairing_id: str, segment: str, index: int) -> str:
    # opaco, nunca se parsea
    return ":".join([session_id, "nassau", pairing_id, segment, str(index)])


# ---------------------------------------------------------------------------------
# -------------------------- validación de resultados -----------------------------
# ---------------------------------------------------------------------------------

def _exclusion_reason(raw: SegmentMatchResult, segments) -> Optional[str]:
    if raw.context and raw.context.strip().lower().startswith("press"):
        return "press"
    if not raw.pairing_id:
        return "missing_pairing_id"
    if not raw.side_a or not raw.side_b:
        return "missing_side"
    if len(raw.side_a) != 1 or len(raw.side_b) != 1:
        return "not_singles"
    if raw.side_a[0] == raw.side_b[0]:
        return "same_player"
    if raw.segment not in segments:
        return "segment_not_in_session"
    if raw.winner not in ("A", "B", "tie"):
        return "unknown_winner"
    return None


def parse_match_result(raw, segments) -> Optional[SegmentOutcome]:
    """
    Convierte un resultado crudo en SegmentWin / SegmentTie.
    Devuelve None si no entra en la liquidación (press, equipos, datos incompletos).
    """
    if not isinstance(raw, SegmentMatchResult):
        try:
            raw = SegmentMatchResult.model_validate(raw)
        except ValidationError as e:
            logger.info("Excluding match result", reason="invalid_record", errors=e.error_count())
            return None

    reason = _exclusion_reason(raw, segments)
    if reason:
        logger.info("Excluding match result", reason=reason, pairing_id=raw.pairing_id, segment=raw.segment)
        return None

    player_a = raw.side_a[0]
    player_b = raw.side_b[0]
    common = dict(
        pairing_id=raw.pairing_id,
        segment=raw.segment,
        context_label=raw.context or "",
        player_a=player_a,
        player_b=player_b,
        holes_won_a=max(raw.holes_won_a, 0),
        holes_won_b=max(raw.holes_won_b, 0),
        tied_holes=max(raw.tied_holes, 0),
    )

    if raw.winner == "A":
        return SegmentWin(winner=player_a, loser=player_b, **common)
    if raw.winner == "B":
        return SegmentWin(winner=player_b, loser=player_a, **common)
    return SegmentTie(**common)


def validate_results(raw_results, segments) -> tuple[list[SegmentOutcome], int]:
    outcomes = []
    seen = set()
    excluded = 0

    for raw in raw_results or []:
        outcome = parse_match_result(raw, segments)
        if outcome is None:
            excluded += 1
            continue

        # un único resultado por emparejamiento y segmento
        key = (outcome.pairing_id, outcome.segment)
        if key in seen:
            logger.info("Excluding match result", reason="duplicate", pairing_id=outcome.pairing_id, segment=outcome.segment)
            excluded += 1
            continue

        seen.add(key)
        outcomes.append(outcome)

    return outcomes, excluded


# ---------------------------------------------------------------------------------
# ---------------------------------- movimientos ----------------------------------
# ---------------------------------------------------------------------------------

def build_line_items(session_id: str, outcomes, bet_settings: BetSettings) -> list[LineItemTransaction]:
    items = []

    for outcome in outcomes:
        if not isinstance(outcome, SegmentWin):
            continue

        amount = segment_amount_cents(bet_settings, outcome.segment)
        if amount <= 0:
            continue

        items.append(LineItemTransaction(
            id=transaction_id(session_id, outcome.pairing_id, outcome.segment, len(items)),
            from_player_id=outcome.loser,
            to_player_id=outcome.winner,
            amount_cents=amount,
            segment=outcome.segment,
            pairing_id=outcome.pairing_id,
        ))

    return sorted(items, key=lambda tx: (tx.pairing_id, segment_order(tx.segment), tx.id))


# ---------------------------------------------------------------------------------
# ------------------------------------ neteo --------------------------------------
# ---------------------------------------------------------------------------------

def _pair_ledgers(line_items):
    """pair_key -> {a, b, net (positivo = de a hacia b), items}"""
    ledgers = {}
    for item in line_items:
        if item.from_player_id == item.to_player_id:
            continue
        a, b = sorted((item.from_player_id, item.to_player_id))
        key = pair_key(a, b)
        row = ledgers.setdefault(key, {"a": a, "b": b, "net": 0, "items": []})
        row["items"].append(item)
        if item.from_player_id == a:
            row["net"] += item.amount_cents
        else:
            row["net"] -= item.amount_cents
    return ledgers


def net_pairwise(line_items, names: dict[str, str] | None = None) -> list[PairwiseSettlement]:
    names = names or {}
    out = []

    for key, row in _pair_ledgers(line_items).items():
        net = row["net"]
        if net == 0:
            # las partidas se quedan en line_items, pero no hay deuda que mostrar
            continue

        a, b = row["a"], row["b"]
        payer, payee = (a, b) if net > 0 else (b, a)

        out.append(PairwiseSettlement(
            pair_key=key,
            player_a_id=a,
            player_a_name=names.get(a, "Player"),
            player_b_id=b,
            player_b_name=names.get(b, "Player"),
            from_player_id=payer,
            from_player_name=names.get(payer, "Player"),
            to_player_id=payee,
            to_player_name=names.get(payee, "Player"),
            amount_cents=abs(net),
            line_items=sorted(row["items"], key=lambda tx: (segment_order(tx.segment), tx.id)),
        ))

    return sorted(out, key=lambda s: (-s.amount_cents, s.pair_key))


def net_balances(line_items, participants: list[Participant] | None = None) -> list[NetBalanceRow]:
    names = {p.player_id: p.name for p in participants or []}
    balances = defaultdict(int)
    for p in participants or []:
        balances[p.player_id] += 0

    # directamente de los movimientos, sin pasar por el neteo por pareja
    for item in line_items:
        balances[item.from_player_id] -= item.amount_cents
        balances[item.to_player_id] += item.amount_cents

    rows = [
        NetBalanceRow(player_id=pid, player_name=names.get(pid, "Player"), net_cents=net)
        for pid, net in balances.items()
    ]
    return sorted(rows, key=lambda r: (-r.net_cents, r.player_name, r.player_id))


def check_conservation(line_items, settlements, balances) -> None:
    total = sum(r.net_cents for r in balances)
    if total != 0:
        raise SettlementImbalanceError(f"net balances sum to {total} cents", total_cents=total)

    ledgers = _pair_ledgers(line_items)
    for s in settlements:
        row = ledgers.get(s.pair_key)
        signed = s.amount_cents if s.from_player_id == s.player_a_id else -s.amount_cents
        if row is None or row["net"] != signed:
            raise SettlementImbalanceError(f"pair {s.pair_key} does not match its line items")


def settle(session: GameSession, raw_results) -> Settlement:
    segments = segments_for_selection(session.hole_selection)
    outcomes, excluded = validate_results(raw_results, segments)
    return settle_outcomes(session, outcomes, excluded)


def settle_outcomes(session: GameSession, outcomes, excluded: int = 0) -> Settlement:
    names = {p.player_id: p.name for p in session.participants}
    line_items = build_line_items(session.id, outcomes, session.bet_settings)
    pairwise = net_pairwise(line_items, names)
    balances = net_balances(line_items, session.participants)

    check_conservation(line_items, pairwise, balances)

    logger.info(
        "Nassau settled",
        session_id=session.id,
        line_items=len(line_items),
        settlements=len(pairwise),
        excluded=excluded,
    )

    return Settlement(
        line_items=line_items,
        pairwise_settlements=pairwise,
        net_balances=balances,
        excluded_count=excluded,
    )
