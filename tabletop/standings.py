"""
Standings and Leaderboards

Aggregates scored results and rating records into the leaderboards shown on
the league dashboard:
- Top players and teams by awarded points
- Top players by current rating
- Placement distribution and bonus hit counts
- Average winning raw score
- Per-player rating summary (net change, peak)
- Pair encounter counts from table history

Inputs are the records the host persisted from score_table(); this module
only reads them.
"""

from dataclasses import asdict, is_dataclass

import numpy as np
import pandas as pd

from tabletop.config import BASELINE_RATING, LEADERBOARD_TOP_N
from tabletop.pairing.generator import build_pair_counts
from tabletop.utils import setup_logging

# --- Module Logger ---
logger = setup_logging(__name__)

# Host payloads use camelCase keys
COLUMN_ALIASES = {
    'id': 'player_id',
    'playerId': 'player_id',
    'rawScore': 'raw_score',
    'pointsAwarded': 'points_awarded',
    'appliedBonusNames': 'applied_bonus_names',
    'tableId': 'table_id',
    'teamId': 'team_id',
    'teamName': 'team_name',
}

RESULT_COLUMNS = ['player_id', 'placement', 'raw_score', 'bonus', 'points_awarded', 'applied_bonus_names']
RATING_COLUMNS = ['player_id', 'before', 'after', 'delta']
PLAYER_COLUMNS = ['player_id', 'name', 'team_id', 'team_name', 'rating']


def _frame(records, columns) -> pd.DataFrame:
    rows = [asdict(r) if is_dataclass(r) else dict(r) for r in records]
    df = pd.DataFrame(rows).rename(columns=COLUMN_ALIASES)
    for col in columns:
        if col not in df.columns:
            df[col] = None
    return df


def results_frame(seats) -> pd.DataFrame:
    """DataFrame of seat outcomes (SeatOutcome objects or result mappings)."""
    return _frame(seats, RESULT_COLUMNS)


def rating_changes_frame(changes) -> pd.DataFrame:
    """DataFrame of rating records (RatingChange objects or mappings)."""
    return _frame(changes, RATING_COLUMNS)


def players_frame(players) -> pd.DataFrame:
    """DataFrame of players; players without a rating sit at the baseline."""
    df = _frame(players, PLAYER_COLUMNS)
    df['rating'] = df['rating'].fillna(BASELINE_RATING)
    return df


def _empty_leaderboards() -> dict:
    return {
        'top_players': pd.DataFrame(columns=['player_id', 'name', 'points', 'games']),
        'top_teams': pd.DataFrame(columns=['team_id', 'name', 'points']),
        'top_ratings': pd.DataFrame(columns=['player_id', 'name', 'team_name', 'rating']),
        'placement_counts': {},
        'bonus_hits': {},
        'avg_winning_score': None,
    }


def compute_leaderboards(results_df: pd.DataFrame, players_df: pd.DataFrame | None = None,
                         top_n: int = LEADERBOARD_TOP_N) -> dict:
    """
    Compute dashboard leaderboards.

    Args:
        results_df: Frame from results_frame()
        players_df: Frame from players_frame(); supplies names, teams and
            current ratings. Optional.
        top_n: Rows kept per leaderboard

    Returns:
        dict with 'top_players', 'top_teams', 'top_ratings' (DataFrames),
        'placement_counts', 'bonus_hits' (dicts) and 'avg_winning_score'
    """
    if players_df is None:
        players_df = players_frame([])

    boards = _empty_leaderboards()
    if not players_df.empty:
        boards['top_ratings'] = (
            players_df.sort_values('rating', ascending=False, kind='stable')
            .head(top_n)[['player_id', 'name', 'team_name', 'rating']]
            .reset_index(drop=True)
        )

    if results_df.empty:
        logger.warning("No results to aggregate")
        return boards

    results = results_df.drop(columns=[c for c in ('name', 'team_id', 'team_name') if c in results_df.columns])
    if players_df.empty:
        results['name'] = None
        results['team_id'] = None
        results['team_name'] = None
    else:
        results = results.merge(
            players_df[['player_id', 'name', 'team_id', 'team_name']],
            on='player_id',
            how='left',
        )
    results['name'] = results['name'].fillna(results['player_id'].astype(str))

    boards['top_players'] = (
        results.groupby('player_id', sort=False)
        .agg(name=('name', 'first'), points=('points_awarded', 'sum'), games=('placement', 'count'))
        .reset_index()
        .sort_values('points', ascending=False, kind='stable')
        .head(top_n)
        .reset_index(drop=True)
    )

    teamed = results[results['team_id'].notna()].copy()
    if not teamed.empty:
        teamed['team_label'] = teamed['team_name'].fillna(teamed['team_id'].astype(str))
        boards['top_teams'] = (
            teamed.groupby('team_id', sort=False)
            .agg(name=('team_label', 'first'), points=('points_awarded', 'sum'))
            .reset_index()
            .sort_values('points', ascending=False, kind='stable')
            .head(top_n)
            .reset_index(drop=True)
        )

    boards['placement_counts'] = {
        int(placement): int(count)
        for placement, count in results['placement'].value_counts().sort_index().items()
    }

    bonus_names = results['applied_bonus_names'].explode().dropna()
    boards['bonus_hits'] = {str(name): int(count) for name, count in bonus_names.value_counts().items()}

    winning = results.loc[(results['placement'] == 1) & results['raw_score'].notna(), 'raw_score']
    if not winning.empty:
        boards['avg_winning_score'] = round(float(np.mean(winning.astype(float))), 2)

    logger.info(
        f"Aggregated {len(results)} results for {results['player_id'].nunique()} players"
    )
    return boards


def compute_rating_summary(changes_df: pd.DataFrame) -> pd.DataFrame:
    """
    Summarize each player's rating records in the order they were applied.

    Returns:
        DataFrame with columns [player_id, tables, net_delta, current_rating,
        peak_rating], highest current rating first
    """
    columns = ['player_id', 'tables', 'net_delta', 'current_rating', 'peak_rating']
    if changes_df.empty:
        return pd.DataFrame(columns=columns)

    history = changes_df.copy()
    history['peak_rating'] = history.groupby('player_id')['after'].cummax()

    summary = (
        history.groupby('player_id', sort=False)
        .agg(
            tables=('delta', 'count'),
            net_delta=('delta', 'sum'),
            current_rating=('after', 'last'),
            peak_rating=('peak_rating', 'last'),
        )
        .reset_index()
        .sort_values('current_rating', ascending=False, kind='stable')
        .reset_index(drop=True)
    )
    return summary[columns]


def compute_pair_encounters(history) -> pd.DataFrame:
    """
    Count how often each pair of players has shared a table.

    Args:
        history: Historical tables (sequences of ids or mappings with playerIds)

    Returns:
        DataFrame with columns [player1, player2, encounters], most
        frequent first
    """
    pair_counts = build_pair_counts(history)

    rows = []
    for key, encounters in pair_counts.items():
        p1, p2 = sorted(key, key=str)
        rows.append({'player1': p1, 'player2': p2, 'encounters': encounters})

    if not rows:
        return pd.DataFrame(columns=['player1', 'player2', 'encounters'])

    df = pd.DataFrame(rows)
    return (
        df.sort_values(['encounters', 'player1', 'player2'], ascending=[False, True, True])
        .reset_index(drop=True)
    )
