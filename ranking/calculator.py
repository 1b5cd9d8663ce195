"""
클럽 포인트 계산 모듈

- 경기 결과 포인트: 규정표(대회 유형 × 성적) 기준, 2부리그/타클럽 보정
- 활동 포인트: 활동 항목 별칭 → 규정표 조회
- 리더보드: (경기 × 가중치) + (활동 × 가중치) + 조정 점수
"""
import json
import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from loguru import logger

from .exceptions import SeasonNotFoundError
from .models import (
    APPLY_TO_ACTIVITY,
    APPLY_TO_MATCH,
    STATUS_CONFIRMED,
    ActivityRecord,
    AdjustmentRecord,
    LeaderboardRow,
    LeaderboardStats,
    MatchRecord,
    PointRules,
    Season,
)
from .normalizer import (
    COMPETITION_TYPE_DOMESTIC,
    LEAGUE_DIVISION2,
    normalize_competition_type,
    normalize_league_type,
    normalize_other_club_flag,
    normalize_rank,
    resolve_activity_label,
)


# =====================================================
# 상수 정의
# =====================================================

# 2부리그 결과는 오픈부 규정값의 30%
DIVISION2_FACTOR = 0.3

# 타클럽 복식 패널티 미설정 시 기본 비율
DEFAULT_OTHER_CLUB_FACTOR = 0.3

MatchLike = Union[MatchRecord, Mapping[str, Any]]
ActivityLike = Union[ActivityRecord, Mapping[str, Any]]
AdjustmentLike = Union[AdjustmentRecord, Mapping[str, Any]]
RulesLike = Union[PointRules, Mapping[str, Any], None]


def round_points(value: float) -> float:
    """소수 둘째 자리 반올림 (0.5는 0에서 먼 쪽으로)"""
    if not math.isfinite(value):
        return float(value)
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _as_rules(rules: RulesLike) -> PointRules:
    if isinstance(rules, PointRules):
        return rules
    return PointRules.from_dict(rules)


def _as_match(record: MatchLike) -> MatchRecord:
    return record if isinstance(record, MatchRecord) else MatchRecord.from_dict(record)


def _as_activity(record: ActivityLike) -> ActivityRecord:
    return record if isinstance(record, ActivityRecord) else ActivityRecord.from_dict(record)


def _as_adjustment(record: AdjustmentLike) -> AdjustmentRecord:
    if isinstance(record, AdjustmentRecord):
        return record
    return AdjustmentRecord.from_dict(record)


# =====================================================
# 포인트 계산
# =====================================================

def calculate_match_points(
    rules: RulesLike,
    competition_type: Any,
    rank: Any,
    league_type: Any = "",
    other_club_member: Any = "",
) -> float:
    """
    경기 결과 포인트 계산

    공식: 규정값 × (국내 2부리그 0.3) × (타클럽 패널티)
    타클럽 패널티가 0~1 사이면 곱하고, 그 외 숫자면 뺀다.
    결과가 음수여도 0으로 자르지 않는다.
    """
    point_rules = _as_rules(rules)
    type_key = normalize_competition_type(competition_type)
    rank_key = normalize_rank(rank)
    league_key = normalize_league_type(league_type)

    base = point_rules.match.get(type_key, {}).get(rank_key, 0.0)

    if type_key == COMPETITION_TYPE_DOMESTIC and league_key == LEAGUE_DIVISION2:
        base = base * DIVISION2_FACTOR

    if normalize_other_club_flag(other_club_member):
        penalty = point_rules.other_club_member_penalty
        if penalty is None:
            base = base * DEFAULT_OTHER_CLUB_FACTOR
        elif 0 < penalty < 1:
            base = base * penalty
        else:
            base = base - penalty

    return round_points(base)


def calculate_activity_points(rules: RulesLike, activity_type: Any) -> float:
    """활동 포인트: 별칭 변환 후 규정표 조회 (없으면 0)"""
    point_rules = _as_rules(rules)
    key = resolve_activity_label(activity_type)
    return point_rules.activity.get(key, 0.0)


def compute_match_points(record: MatchLike, rules: RulesLike) -> float:
    """저장된 포인트가 있으면 그대로, 없으면 현재 규정으로 계산"""
    match = _as_match(record)
    if match.points is not None:
        return match.points
    return calculate_match_points(
        rules,
        match.competition_type,
        match.rank,
        match.league_type,
        match.other_club_member,
    )


def compute_activity_points(record: ActivityLike, rules: RulesLike) -> float:
    """저장된 포인트가 있으면 그대로, 없으면 현재 규정으로 계산"""
    activity = _as_activity(record)
    if activity.points is not None:
        return activity.points
    return calculate_activity_points(rules, activity.activity_type)


# =====================================================
# 집계
# =====================================================

def select_confirmed(records: Sequence[Any]) -> List[Any]:
    """확정(confirmed) 레코드가 하나라도 있으면 확정분만, 없으면 전체"""
    def status_of(record: Any) -> str:
        if isinstance(record, Mapping):
            return str(record.get("status") or "")
        return getattr(record, "status", "") or ""

    confirmed = [r for r in records if status_of(r) == STATUS_CONFIRMED]
    return confirmed if confirmed else list(records)


def build_adjustment_index(adjustments: Iterable[AdjustmentLike]) -> Dict[str, Dict[str, Any]]:
    """선수별 조정 점수 (match / activity / total 버킷 + 상세)"""
    index: Dict[str, Dict[str, Any]] = {}

    for raw in adjustments:
        adjustment = _as_adjustment(raw)
        name = adjustment.player_name.strip()
        if not name:
            continue

        current = index.setdefault(
            name, {"match": 0.0, "activity": 0.0, "total": 0.0, "details": []}
        )
        points = adjustment.signed_points
        if adjustment.apply_to == APPLY_TO_MATCH:
            current["match"] += points
        elif adjustment.apply_to == APPLY_TO_ACTIVITY:
            current["activity"] += points
        else:
            current["total"] += points
        current["details"].append(adjustment)

    return index


def _sort_key(row: LeaderboardRow):
    # 동점이면 이름순
    return (-row.total_points, row.player_name)


def build_leaderboard(
    matches: Iterable[MatchLike],
    activities: Iterable[ActivityLike],
    adjustments: Iterable[AdjustmentLike],
    season: Optional[Union[Season, Mapping[str, Any]]],
) -> List[LeaderboardRow]:
    """
    리더보드 계산

    Args:
        matches: 경기 결과 레코드
        activities: 활동 레코드
        adjustments: 조정 레코드
        season: 시즌 (가중치 + 규정표)

    Returns:
        총점 내림차순 (동점은 이름 오름차순) 리더보드
    """
    if season is None:
        raise SeasonNotFoundError()
    if not isinstance(season, Season):
        season = Season.from_dict(season)

    rules = season.point_rules

    match_map: Dict[str, Dict[str, Any]] = {}
    for raw in matches:
        match = _as_match(raw)
        if not match.player_name:
            continue
        current = match_map.setdefault(
            match.player_name, {"points": 0.0, "count": 0, "uid": match.player_uid}
        )
        current["points"] += compute_match_points(match, rules)
        current["count"] += 1

    activity_map: Dict[str, Dict[str, Any]] = {}
    for raw in activities:
        activity = _as_activity(raw)
        if not activity.player_name:
            continue
        current = activity_map.setdefault(
            activity.player_name, {"points": 0.0, "count": 0, "uid": activity.player_uid}
        )
        current["points"] += compute_activity_points(activity, rules)
        current["count"] += 1

    adjust_index = build_adjustment_index(adjustments)

    players = set(match_map) | set(activity_map) | set(adjust_index)

    rows: List[LeaderboardRow] = []
    for name in players:
        match_info = match_map.get(name, {"points": 0.0, "count": 0, "uid": ""})
        activity_info = activity_map.get(name, {"points": 0.0, "count": 0, "uid": ""})
        adjust = adjust_index.get(name, {"match": 0.0, "activity": 0.0, "total": 0.0, "details": []})

        total_points = (
            match_info["points"] * season.match_weight
            + activity_info["points"] * season.activity_weight
            + adjust["match"]
            + adjust["activity"]
            + adjust["total"]
        )

        rows.append(LeaderboardRow(
            player_name=name,
            player_uid=match_info["uid"] or activity_info["uid"] or None,
            match_points_base=match_info["points"],
            activity_points_base=activity_info["points"],
            match_adjustment=adjust["match"],
            activity_adjustment=adjust["activity"],
            total_adjustment=adjust["total"],
            matches_count=match_info["count"],
            activities_count=activity_info["count"],
            total_points=round_points(total_points),
            adjustments=list(adjust["details"]),
        ))

    rows.sort(key=_sort_key)

    for i, row in enumerate(rows, 1):
        row.current_rank = i

    return rows


def summarize_leaderboard(rows: Sequence[LeaderboardRow]) -> LeaderboardStats:
    """참여 선수 수, 경기/활동 총 건수"""
    return LeaderboardStats(
        total_players=len(rows),
        total_matches=sum(r.matches_count for r in rows),
        total_activities=sum(r.activities_count for r in rows),
    )


# =====================================================
# 리더보드 계산기 클래스
# =====================================================

class ClubRankCalculator:
    """클럽 포인트 리더보드 계산기"""

    def __init__(self, data_file: str = None):
        self.season: Optional[Season] = None
        self.matches: List[MatchRecord] = []
        self.activities: List[ActivityRecord] = []
        self.adjustments: List[AdjustmentRecord] = []

        if data_file:
            self.load_data(data_file)

    def load_data(self, data_file: str):
        """JSON 덤프 로드"""
        with open(data_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        self.load_from_data(data)

    def load_from_data(self, data: dict):
        """메모리 데이터에서 로드

        Args:
            data: {"season": {...}, "matches": [...], "activities": [...],
                   "adjustments": [...]} 형식의 딕셔너리
        """
        season_data = data.get("season")
        self.season = Season.from_dict(season_data) if season_data else None

        self.matches = [MatchRecord.from_dict(m) for m in select_confirmed(data.get("matches") or [])]
        self.activities = [
            ActivityRecord.from_dict(a) for a in select_confirmed(data.get("activities") or [])
        ]
        self.adjustments = [AdjustmentRecord.from_dict(a) for a in data.get("adjustments") or []]

        logger.info(
            f"데이터 로드 완료: 경기 {len(self.matches)}건, "
            f"활동 {len(self.activities)}건, 조정 {len(self.adjustments)}건"
        )

    def calculate_leaderboard(self) -> List[LeaderboardRow]:
        """현재 로드된 데이터로 리더보드 계산"""
        return build_leaderboard(self.matches, self.activities, self.adjustments, self.season)

    def export_leaderboard(self, output_file: str):
        """리더보드를 JSON으로 내보내기"""
        rows = self.calculate_leaderboard()
        stats = summarize_leaderboard(rows)

        export_data = {
            "meta": {
                "generated_at": datetime.now().isoformat(),
                "season_id": self.season.id,
                "season_title": self.season.display_title,
                "rules_version": self.season.rules_version,
                "match_weight": self.season.match_weight,
                "activity_weight": self.season.activity_weight,
            },
            "stats": stats.to_dict(),
            "leaderboard": [row.to_dict() for row in rows],
        }

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(export_data, f, ensure_ascii=False, indent=2)

        logger.info(f"리더보드 내보내기 완료: {output_file}")

    def print_leaderboard_summary(self, rows: List[LeaderboardRow], title: str = "", top_n: int = 20):
        """리더보드 요약 출력"""
        print(f"\n{'='*64}")
        print(f" {title}")
        print(f"{'='*64}")
        print(f"{'순위':>4} {'이름':<10} {'경기':>8} {'활동':>8} {'조정':>8} {'총점':>10}")
        print(f"{'-'*64}")

        for r in rows[:top_n]:
            adjust = r.match_adjustment + r.activity_adjustment + r.total_adjustment
            print(
                f"{r.current_rank:>4} {r.player_name:<10} {r.match_points_base:>8.2f} "
                f"{r.activity_points_base:>8.2f} {adjust:>8.2f} {r.total_points:>10.2f}"
            )
