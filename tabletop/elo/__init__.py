"""
Elo Rating System

Modules:
- engine: Pairwise Elo updates for a single 4-player table
"""


def __getattr__(name):
    """Lazy imports so submodules load only when used."""
    if name in ("compute_elo_for_table", "expected_score", "RatingChange", "TableEloInput"):
        from tabletop.elo import engine
        return getattr(engine, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
