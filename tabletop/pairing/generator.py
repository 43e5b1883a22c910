"""
Round Pairing Generator

This module partitions a tournament roster into 4-player tables for the next
round. It keeps players who have already shared tables apart and mixes teams
where it can:
- Repeat pairs are counted once from every historical table
- The unassigned player with the heaviest repeat load anchors each new table
- Every 3-player completion of the anchor's table is scored exhaustively
- A perfect 2v2 team split is rewarded, lopsided team groupings penalized

Usage:
    from tabletop.pairing import generate_round
"""

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field
from itertools import combinations

from tabletop.config import (
    TABLE_SIZE,
    TEAM_BALANCE_REWARD,
    TEAM_CROWD_PENALTY,
    TEAM_SPREAD_PENALTY,
    SOLO_TEAM_PREFIX,
)
from tabletop.exceptions import DuplicatePlayer, InvalidRosterSize, UnsatisfiableAssignment
from tabletop.utils import get_field, pair_key, setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class PlayerProfile:
    id: object
    name: str = ""
    team_id: object = None


@dataclass
class GeneratedTable:
    table_index: int
    player_ids: list
    team_summary: dict[str, int]
    pair_score: float


@dataclass
class RoundGeneration:
    tables: list[GeneratedTable] = field(default_factory=list)
    explanation: list[str] = field(default_factory=list)


def _as_profile(player) -> PlayerProfile:
    if isinstance(player, PlayerProfile):
        return player
    return PlayerProfile(
        id=get_field(player, "id"),
        name=get_field(player, "name", default=""),
        team_id=get_field(player, "teamId", "team_id"),
    )


def _table_ids(table) -> list:
    if isinstance(table, Mapping) or hasattr(table, "player_ids"):
        return list(get_field(table, "playerIds", "player_ids", default=()))
    return list(table)


def build_pair_counts(history) -> Counter:
    """
    Count how many historical tables each unordered pair has shared.

    Args:
        history: Historical tables, each a sequence of player ids or a
            mapping with playerIds

    Returns:
        Counter keyed by pair_key(a, b)
    """
    pair_counts = Counter()
    for table in history:
        for a, b in combinations(_table_ids(table), 2):
            if a == b:
                continue
            pair_counts[pair_key(a, b)] += 1
    return pair_counts


def pair_load(candidate: PlayerProfile, pool, pair_counts) -> int:
    """Repeat count between a player and everyone else still in the pool."""
    return sum(
        pair_counts[pair_key(candidate.id, other.id)]
        for other in pool
        if other.id != candidate.id
    )


def team_groups(group) -> list[int]:
    """Group sizes by team, largest first. Teamless players stand alone."""
    counts = Counter(
        p.team_id if p.team_id is not None else (SOLO_TEAM_PREFIX, p.id)
        for p in group
    )
    return sorted(counts.values(), reverse=True)


def score_candidate(group, pair_counts) -> float:
    """
    Score a candidate table; lower is better.

    The repeat-pair count over all six pairs, then -0.5 for a perfect 2v2
    team split, otherwise + largest group size x 0.5 (3+ members) or x 0.2.
    """
    score = sum(pair_counts[pair_key(a.id, b.id)] for a, b in combinations(group, 2))

    counts = team_groups(group)
    if counts == [2, 2]:
        score -= TEAM_BALANCE_REWARD
    elif counts[0] > 2:
        score += counts[0] * TEAM_CROWD_PENALTY
    else:
        score += counts[0] * TEAM_SPREAD_PENALTY
    return score


def team_summary(group) -> dict[str, int]:
    summary = Counter(
        f"team-{p.team_id}" if p.team_id is not None else f"player-{p.id}"
        for p in group
    )
    return dict(summary)


def explain_table(table: GeneratedTable) -> str:
    repeats = table.pair_score if table.pair_score >= 0 else 0
    return f"Table {table.table_index} minimised repeat pair score {repeats:.2f}"


def generate_round(roster, history=()) -> RoundGeneration:
    """
    Generate the next round's tables.

    Args:
        roster: PlayerProfile entries (or mappings with id, name, teamId);
            the length must be a multiple of 4
        history: Every table already played in the tournament

    Returns:
        RoundGeneration with one GeneratedTable per 4 players and one
        explanation line per table

    Raises:
        InvalidRosterSize: If the roster does not split into full tables
        DuplicatePlayer: If a player id appears more than once
        UnsatisfiableAssignment: If no table can be completed for an anchor
    """
    players = [_as_profile(p) for p in roster]
    if len(players) % TABLE_SIZE != 0:
        raise InvalidRosterSize(len(players))
    duplicates = [pid for pid, n in Counter(p.id for p in players).items() if n > 1]
    if duplicates:
        raise DuplicatePlayer(duplicates)

    pair_counts = build_pair_counts(history)
    remaining = list(players)
    tables = []

    logger.info(
        f"Generating round for {len(players)} players "
        f"({len(pair_counts)} historical pairs)"
    )

    while remaining:
        # Stable sort: equal loads keep their current order
        loads = {p.id: pair_load(p, remaining, pair_counts) for p in remaining}
        remaining.sort(key=lambda p: loads[p.id], reverse=True)
        anchor = remaining.pop(0)

        best_combo = None
        best_score = float("inf")
        for combo in combinations(remaining, TABLE_SIZE - 1):
            score = score_candidate((anchor, *combo), pair_counts)
            if score < best_score:
                best_score = score
                best_combo = combo

        if best_combo is None:
            raise UnsatisfiableAssignment(anchor.id, len(remaining))

        group = (anchor, *best_combo)
        table = GeneratedTable(
            table_index=len(tables) + 1,
            player_ids=[p.id for p in group],
            team_summary=team_summary(group),
            pair_score=best_score,
        )
        tables.append(table)
        logger.debug(
            f"Table {table.table_index}: anchor {anchor.id} (load {loads[anchor.id]}), "
            f"players {table.player_ids}, score {best_score:.2f}"
        )

        chosen = {p.id for p in best_combo}
        remaining = [p for p in remaining if p.id not in chosen]

    explanation = [explain_table(table) for table in tables]
    logger.info(f"Generated {len(tables)} tables")
    return RoundGeneration(tables=tables, explanation=explanation)
