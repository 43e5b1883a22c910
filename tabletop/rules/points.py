"""
Placement Points

Converts a seat's placement and raw score into awarded points under a
ruleset: base points from the placement table plus every bonus rule whose
conditions hold. Never raises.
"""

from dataclasses import dataclass, field

from tabletop.config import DEFAULT_POINTS_BY_PLACEMENT
from tabletop.rules.ruleset import Ruleset, coerce_rules
from tabletop.utils import placement_key, to_number


@dataclass(frozen=True)
class PointsResult:
    base_points: float
    bonus: float
    total: float
    applied_bonus_names: list[str] = field(default_factory=list)


def resolve_points_by_placement(ruleset=None) -> dict[str, float]:
    """Default placement table overlaid with the ruleset's own entries."""
    ruleset = coerce_rules(ruleset)
    if not ruleset.points_by_placement:
        return dict(DEFAULT_POINTS_BY_PLACEMENT)
    return {**DEFAULT_POINTS_BY_PLACEMENT, **ruleset.points_by_placement}


def _normalize_raw_score(raw_score):
    if raw_score is None:
        return None
    try:
        return to_number(raw_score)
    except ValueError:
        return None


def compute_points(placement, raw_score=None, ruleset: Ruleset | dict | None = None) -> PointsResult:
    """
    Compute awarded points for one seat.

    Args:
        placement: Finishing rank at the table (1 = best)
        raw_score: Game score, or None when not recorded. A missing score
            never satisfies a rawScoreAtLeast condition.
        ruleset: Ruleset, or a raw ruleset payload to normalize

    Returns:
        PointsResult with base points, summed bonus, total and the names of
        the applied bonuses in rule order
    """
    ruleset = coerce_rules(ruleset)
    table = resolve_points_by_placement(ruleset)
    base_points = table.get(placement_key(placement), 0)
    raw_score = _normalize_raw_score(raw_score)

    bonus = 0
    applied = []
    for rule in ruleset.bonuses:
        if rule.condition.matches(placement, raw_score):
            bonus += rule.add_points
            applied.append(rule.name)

    return PointsResult(
        base_points=base_points,
        bonus=bonus,
        total=base_points + bonus,
        applied_bonus_names=applied,
    )
