"""
Round Pairing

Modules:
- generator: Greedy anchor + exhaustive search table assignment
"""


def __getattr__(name):
    """Lazy imports so submodules load only when used."""
    if name in ("generate_round", "build_pair_counts", "PlayerProfile", "GeneratedTable", "RoundGeneration"):
        from tabletop.pairing import generator
        return getattr(generator, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
