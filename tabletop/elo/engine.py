"""
Table Elo Engine

Rates one 4-player free-for-all table by treating it as six pairwise
matches: every player is resolved against each of the other three, the
wins minus expected wins are summed, and the sum is scaled by K.

Each player's delta is rounded half-up and then clamped on its own, so the
four deltas only approximately cancel out. They are not renormalized to a
zero-sum pool.

Usage:
    from tabletop.elo import compute_elo_for_table
"""

import math
from dataclasses import dataclass

from tabletop.config import DEFAULT_CLAMP, DEFAULT_K_FACTOR, ELO_SCALE, TABLE_SIZE
from tabletop.exceptions import TableSizeError
from tabletop.utils import get_field, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class TableEloInput:
    player_id: object
    placement: int
    rating: float


@dataclass(frozen=True)
class RatingChange:
    player_id: object
    before: float
    after: float
    delta: int


def expected_score(rating_a, rating_b):
    """Calculate expected probability of player A beating player B"""
    return 1 / (1 + 10 ** ((rating_b - rating_a) / ELO_SCALE))


def placement_beats(placement_a, placement_b):
    """1 when A finished ahead of B, else 0."""
    return 1 if placement_a < placement_b else 0


def round_half_up(value):
    """Round to the nearest integer, ties toward positive infinity."""
    return math.floor(value + 0.5)


def clamp_delta(delta, clamp):
    if delta > clamp:
        return clamp
    if delta < -clamp:
        return -clamp
    return delta


def _as_input(entry) -> TableEloInput:
    if isinstance(entry, TableEloInput):
        return entry
    return TableEloInput(
        player_id=get_field(entry, "playerId", "player_id"),
        placement=get_field(entry, "placement"),
        rating=get_field(entry, "rating"),
    )


def compute_elo_for_table(players, k_factor=DEFAULT_K_FACTOR, clamp=DEFAULT_CLAMP) -> list[RatingChange]:
    """
    Compute rating changes for a single 4-player table.

    Args:
        players: Exactly four TableEloInput entries (or mappings with
            playerId, placement and rating)
        k_factor: Rating sensitivity; None selects the default
        clamp: Maximum absolute delta per player

    Returns:
        One RatingChange per entry, in input order

    Raises:
        TableSizeError: If the table does not have exactly four entries
    """
    players = [_as_input(p) for p in players]
    if len(players) != TABLE_SIZE:
        raise TableSizeError(len(players))

    if k_factor is None:
        k_factor = DEFAULT_K_FACTOR

    changes = []
    for idx, player in enumerate(players):
        sum_diff = 0.0
        for j, opponent in enumerate(players):
            if j == idx:
                continue
            expected = expected_score(player.rating, opponent.rating)
            actual = placement_beats(player.placement, opponent.placement)
            sum_diff += actual - expected

        delta = int(clamp_delta(round_half_up(k_factor * sum_diff), clamp))
        changes.append(RatingChange(
            player_id=player.player_id,
            before=player.rating,
            after=player.rating + delta,
            delta=delta,
        ))

    summary = ", ".join(f"{c.player_id}:{c.delta:+d}" for c in changes)
    logger.debug(f"Table rated (k={k_factor}, clamp={clamp}): {summary}")
    return changes
