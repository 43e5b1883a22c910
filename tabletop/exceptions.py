"""
Engine exceptions.

Structural and precondition failures raised by the pairing, rating and
table scoring functions. Ruleset problems are never raised; they are
normalized to defaults instead.
"""

from tabletop.config import TABLE_SIZE


class TabletopError(ValueError):
    """Base class for all engine validation failures"""
    pass


class InvalidRosterSize(TabletopError):
    """Roster size is not a multiple of the table size"""
    def __init__(self, roster_size, table_size=TABLE_SIZE):
        self.roster_size = roster_size
        self.table_size = table_size
        super().__init__(
            f"Player count must be divisible by {table_size}, got {roster_size}"
        )


class UnsatisfiableAssignment(TabletopError):
    """No table could be completed around the chosen anchor"""
    def __init__(self, anchor_id, remaining):
        self.anchor_id = anchor_id
        self.remaining = remaining
        super().__init__(
            f"Unable to build a table around player {anchor_id} "
            f"with {remaining} remaining players"
        )


class TableSizeError(TabletopError):
    """A table does not contain exactly four entries"""
    def __init__(self, size, table_size=TABLE_SIZE):
        self.size = size
        self.table_size = table_size
        super().__init__(f"Tables must contain exactly {table_size} players, got {size}")


class InvalidPlacements(TabletopError):
    """Placements at a table are not a permutation of 1..4"""
    def __init__(self, placements):
        self.placements = list(placements)
        super().__init__(
            f"Placements must be unique values 1-4, got {self.placements}"
        )


class DuplicatePlayer(TabletopError):
    """A player id appears more than once in a roster"""
    def __init__(self, player_ids):
        self.player_ids = list(player_ids)
        super().__init__(f"Roster contains duplicate player ids: {self.player_ids}")
