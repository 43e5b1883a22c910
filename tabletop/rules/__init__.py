"""
Rule Engine

Modules:
- ruleset: Ruleset model and defensive normalization (coerce_rules)
- points: Placement points and bonus evaluation (compute_points)
"""


def __getattr__(name):
    """Lazy imports so submodules load only when used."""
    if name in ("Ruleset", "BonusRule", "BonusCondition", "coerce_rules"):
        from tabletop.rules import ruleset
        return getattr(ruleset, name)
    if name in ("PointsResult", "compute_points", "resolve_points_by_placement"):
        from tabletop.rules import points
        return getattr(points, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
