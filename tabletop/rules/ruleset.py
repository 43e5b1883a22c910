"""
Ruleset Normalization

Rulesets are operator-edited configuration stored by the host as loose JSON:

    {
      "pointsByPlacement": {"1": 6, "2": 4, "3": 2, "4": 0},
      "bonuses": [{"name": "High score", "if": {"rawScoreAtLeast": 80}, "addPoints": 2}],
      "kFactor": 28
    }

coerce_rules() turns any such value into a Ruleset. It never raises: a
malformed payload degrades to the empty ruleset, which resolves to the
default placement table, no bonuses and the default K-factor.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from tabletop.config import DEFAULT_BONUS_NAME
from tabletop.utils import placement_key, setup_logging, to_number

# --- Module Logger ---
logger = setup_logging(__name__)


@dataclass(frozen=True)
class BonusCondition:
    """All present sub-conditions must hold for the bonus to apply."""
    raw_score_at_least: float | None = None
    placement_equals: int | None = None

    def matches(self, placement, raw_score=None) -> bool:
        if self.raw_score_at_least is not None:
            score = float("-inf") if raw_score is None else raw_score
            if not score >= self.raw_score_at_least:
                return False
        if self.placement_equals is not None and placement != self.placement_equals:
            return False
        return True


@dataclass(frozen=True)
class BonusRule:
    name: str
    condition: BonusCondition
    add_points: float


@dataclass(frozen=True)
class Ruleset:
    """Normalized ruleset. Unset fields resolve to the configured defaults."""
    points_by_placement: dict[str, float] | None = None
    bonuses: tuple[BonusRule, ...] = field(default_factory=tuple)
    k_factor: float | None = None

    def to_dict(self) -> dict:
        """Serialize back to the external camelCase schema."""
        payload = {}
        if self.points_by_placement is not None:
            payload["pointsByPlacement"] = dict(self.points_by_placement)
        if self.bonuses:
            payload["bonuses"] = []
            for bonus in self.bonuses:
                condition = {}
                if bonus.condition.raw_score_at_least is not None:
                    condition["rawScoreAtLeast"] = bonus.condition.raw_score_at_least
                if bonus.condition.placement_equals is not None:
                    condition["placementEquals"] = bonus.condition.placement_equals
                payload["bonuses"].append({
                    "name": bonus.name,
                    "if": condition,
                    "addPoints": bonus.add_points,
                })
        if self.k_factor is not None:
            payload["kFactor"] = self.k_factor
        return payload


def _coerce_condition(raw) -> BonusCondition:
    if raw is None:
        return BonusCondition()
    if not isinstance(raw, Mapping):
        raise TypeError(f"Bonus condition must be an object, got {type(raw).__name__}")

    at_least = raw.get("rawScoreAtLeast")
    equals = raw.get("placementEquals")
    return BonusCondition(
        raw_score_at_least=None if at_least is None else to_number(at_least),
        placement_equals=None if equals is None else to_number(equals),
    )


def _coerce_bonus(raw) -> BonusRule:
    if not isinstance(raw, Mapping):
        raise TypeError(f"Bonus rule must be an object, got {type(raw).__name__}")

    name = raw.get("name")
    add_points = raw.get("addPoints")
    return BonusRule(
        name=DEFAULT_BONUS_NAME if name is None else str(name),
        condition=_coerce_condition(raw.get("if")),
        add_points=0 if add_points is None else to_number(add_points),
    )


def _coerce_points_table(raw) -> dict[str, float]:
    if not isinstance(raw, Mapping):
        raise TypeError(f"pointsByPlacement must be an object, got {type(raw).__name__}")
    return {placement_key(key): to_number(value) for key, value in raw.items()}


def coerce_rules(raw) -> Ruleset:
    """
    Normalize an externally supplied ruleset.

    Args:
        raw: Anything; usually the decoded JSON stored against a game

    Returns:
        Ruleset with numeric point values, string placement keys and a
        numeric K-factor. Non-object input, or any field that fails to
        coerce, yields the empty Ruleset().
    """
    if isinstance(raw, Ruleset):
        return raw
    if not raw or not isinstance(raw, Mapping):
        return Ruleset()

    try:
        bonuses = raw.get("bonuses")
        if bonuses and not isinstance(bonuses, (list, tuple)):
            raise TypeError(f"bonuses must be a list, got {type(bonuses).__name__}")

        points = raw.get("pointsByPlacement")
        k_factor = raw.get("kFactor")

        return Ruleset(
            points_by_placement=_coerce_points_table(points) if points is not None else None,
            bonuses=tuple(_coerce_bonus(bonus) for bonus in bonuses or ()),
            k_factor=to_number(k_factor) if k_factor is not None else None,
        )
    except (TypeError, ValueError) as e:
        logger.warning(f"Malformed ruleset, falling back to defaults: {e}")
        return Ruleset()
