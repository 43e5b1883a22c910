"""
Table Scoring

Turns one table's submitted results into awarded points and rating
changes. The host persists both; nothing here touches storage.
"""

from dataclasses import dataclass, field

from tabletop.config import BASELINE_RATING, DEFAULT_CLAMP, TABLE_SIZE
from tabletop.elo.engine import RatingChange, TableEloInput, compute_elo_for_table
from tabletop.exceptions import TableSizeError
from tabletop.rules.points import compute_points
from tabletop.rules.ruleset import coerce_rules
from tabletop.utils import get_field, setup_logging, validate_placements

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class SeatOutcome:
    player_id: object
    placement: int
    raw_score: float | None
    base_points: float
    bonus: float
    points_awarded: float
    applied_bonus_names: list[str] = field(default_factory=list)


@dataclass
class TableScore:
    seats: list[SeatOutcome]
    rating_changes: list[RatingChange]


def score_table(entries, ratings=None, ruleset=None, clamp=DEFAULT_CLAMP) -> TableScore:
    """
    Score a completed table.

    Args:
        entries: Four results, each with playerId, placement and an
            optional rawScore
        ratings: Mapping of player id -> current rating; unrated players
            start at BASELINE_RATING
        ruleset: Ruleset or raw ruleset payload; its kFactor drives the
            rating update
        clamp: Maximum absolute rating change per player

    Returns:
        TableScore with one SeatOutcome and one RatingChange per entry

    Raises:
        TableSizeError: If there are not exactly four entries
        InvalidPlacements: If placements are not a permutation of 1..4
    """
    entries = list(entries)
    if len(entries) != TABLE_SIZE:
        raise TableSizeError(len(entries))

    rows = [
        (
            get_field(e, "playerId", "player_id"),
            get_field(e, "placement"),
            get_field(e, "rawScore", "raw_score"),
        )
        for e in entries
    ]
    validate_placements(placement for _, placement, _ in rows)

    rules = coerce_rules(ruleset)
    ratings = ratings or {}

    seats = []
    for player_id, placement, raw_score in rows:
        points = compute_points(placement, raw_score, rules)
        seats.append(SeatOutcome(
            player_id=player_id,
            placement=placement,
            raw_score=raw_score,
            base_points=points.base_points,
            bonus=points.bonus,
            points_awarded=points.total,
            applied_bonus_names=points.applied_bonus_names,
        ))

    rating_changes = compute_elo_for_table(
        [
            TableEloInput(player_id, placement, ratings.get(player_id, BASELINE_RATING))
            for player_id, placement, _ in rows
        ],
        k_factor=rules.k_factor,
        clamp=clamp,
    )

    summary = ", ".join(f"{s.player_id}=#{s.placement}/{s.points_awarded}pts" for s in seats)
    logger.debug(f"Scored table: {summary}")
    return TableScore(seats=seats, rating_changes=rating_changes)
