"""
클럽 포인트 랭킹 시스템

경기 결과 + 활동 + 수동 조정을 시즌 가중치로 합산하는 리더보드 모듈
"""
from .calculator import (
    ClubRankCalculator,
    build_adjustment_index,
    build_leaderboard,
    calculate_activity_points,
    calculate_match_points,
    compute_activity_points,
    compute_match_points,
    select_confirmed,
    summarize_leaderboard,
    DIVISION2_FACTOR,
    DEFAULT_OTHER_CLUB_FACTOR,
)
from .exceptions import (
    ClubPointError,
    SeasonNotFoundError,
    RecordNotFoundError,
    PermissionDeniedError,
)
from .models import (
    PointRules,
    Season,
    MatchRecord,
    ActivityRecord,
    AdjustmentRecord,
    LeaderboardRow,
    LeaderboardStats,
)
from .normalizer import (
    normalize_text,
    normalize_competition_type,
    normalize_rank,
    normalize_league_type,
    normalize_other_club_flag,
    resolve_activity_label,
    ACTIVITY_ALIAS,
)

__all__ = [
    "ClubRankCalculator",
    "build_adjustment_index",
    "build_leaderboard",
    "calculate_activity_points",
    "calculate_match_points",
    "compute_activity_points",
    "compute_match_points",
    "select_confirmed",
    "summarize_leaderboard",
    "DIVISION2_FACTOR",
    "DEFAULT_OTHER_CLUB_FACTOR",
    "ClubPointError",
    "SeasonNotFoundError",
    "RecordNotFoundError",
    "PermissionDeniedError",
    "PointRules",
    "Season",
    "MatchRecord",
    "ActivityRecord",
    "AdjustmentRecord",
    "LeaderboardRow",
    "LeaderboardStats",
    "normalize_text",
    "normalize_competition_type",
    "normalize_rank",
    "normalize_league_type",
    "normalize_other_club_flag",
    "resolve_activity_label",
    "ACTIVITY_ALIAS",
]
