"""
Central configuration for the Tabletop League Engine.

All shared constants and configuration values should be defined here
to avoid duplication and ensure consistency across modules.
"""

# --- Table Configuration ---
TABLE_SIZE = 4  # Every table seats exactly four players
PLACEMENTS = (1, 2, 3, 4)

# --- Points Configuration ---
# String keys, matching rulesets decoded from JSON
DEFAULT_POINTS_BY_PLACEMENT = {
    "1": 5,
    "2": 3,
    "3": 2,
    "4": 1,
}
DEFAULT_BONUS_NAME = "Bonus"  # Label for bonus rules configured without a name

# --- Elo System Configuration ---
BASELINE_RATING = 1500  # Starting rating for players with no rating yet
DEFAULT_K_FACTOR = 24  # Elo K-factor (higher = faster rating changes)
DEFAULT_CLAMP = 48  # Maximum absolute rating change from a single table
ELO_SCALE = 400  # Logistic scale of the expected score curve

# --- Pairing Configuration ---
# Empirically tuned; applied on top of the repeat-pair count of a candidate table
TEAM_BALANCE_REWARD = 0.5  # Subtracted for a perfect 2v2 team split
TEAM_CROWD_PENALTY = 0.5  # Per member of the largest group when it holds 3+
TEAM_SPREAD_PENALTY = 0.2  # Per member of the largest group otherwise
SOLO_TEAM_PREFIX = "solo"  # Grouping key tag for players without a team

# --- Standings Configuration ---
LEADERBOARD_TOP_N = 10  # Rows returned per leaderboard
