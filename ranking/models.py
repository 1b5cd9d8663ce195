"""
클럽 포인트 데이터 모델

문서 저장소에서 읽은 레코드는 필드가 빠져 있거나 형식이 섞여 있을 수 있다.
from_dict()에서 모든 기본값을 한 번에 결정하고, 계산 로직은 항상 완성된
객체만 다룬다.
"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


DEFAULT_MATCH_WEIGHT = 0.5
DEFAULT_ACTIVITY_WEIGHT = 0.5

APPLY_TO_MATCH = "match"
APPLY_TO_ACTIVITY = "activity"
APPLY_TO_TOTAL = "total"
APPLY_TO_VALUES = (APPLY_TO_MATCH, APPLY_TO_ACTIVITY, APPLY_TO_TOTAL)

ADJUSTMENT_BONUS = "bonus"
ADJUSTMENT_PENALTY = "penalty"

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"


# =====================================================
# 값 변환
# =====================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def stored_points(value: Any) -> Optional[float]:
    """저장된 포인트 값. 실제 숫자일 때만 인정 (문자열/bool/NaN 제외)"""
    if _is_number(value) and not math.isnan(value):
        return float(value)
    return None


def safe_number(value: Any) -> float:
    """숫자 변환. 비어 있거나 숫자가 아니면 0"""
    if isinstance(value, bool):
        return float(value)
    if _is_number(value):
        return 0.0 if math.isnan(value) else float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
        return 0.0 if math.isnan(number) or math.isinf(number) else number
    return 0.0


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _weight(value: Any, default: float) -> float:
    return float(value) if _is_number(value) else default


# =====================================================
# 시즌 / 규정표
# =====================================================

@dataclass
class PointRules:
    """시즌 포인트 규정표"""
    match: Dict[str, Dict[str, float]] = field(default_factory=dict)
    activity: Dict[str, float] = field(default_factory=dict)
    other_club_member_penalty: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PointRules":
        data = data or {}
        raw_match = data.get("match") or {}
        raw_activity = data.get("activity") or {}

        match_table: Dict[str, Dict[str, float]] = {}
        for comp_type, ranks in raw_match.items():
            # otherClubMemberPenalty가 match 안에 저장된 시즌도 있음
            if not isinstance(ranks, Mapping):
                continue
            match_table[comp_type] = {
                rank: float(points) for rank, points in ranks.items() if _is_number(points)
            }

        activity_table = {
            name: float(points) for name, points in raw_activity.items() if _is_number(points)
        }

        penalty = data.get("otherClubMemberPenalty")
        if not _is_number(penalty) and isinstance(raw_match, Mapping):
            penalty = raw_match.get("otherClubMemberPenalty")

        return cls(
            match=match_table,
            activity=activity_table,
            other_club_member_penalty=float(penalty) if _is_number(penalty) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"match": self.match, "activity": self.activity}
        if self.other_club_member_penalty is not None:
            data["otherClubMemberPenalty"] = self.other_club_member_penalty
        return data


@dataclass
class Season:
    """포인트 집계 시즌"""
    id: str
    title: str = ""
    is_active: bool = False
    match_weight: float = DEFAULT_MATCH_WEIGHT
    activity_weight: float = DEFAULT_ACTIVITY_WEIGHT
    point_rules: PointRules = field(default_factory=PointRules)
    rules_version: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], season_id: Optional[str] = None) -> "Season":
        sid = season_id if season_id is not None else data.get("id")
        return cls(
            id=_text(sid),
            title=_text(data.get("title")),
            is_active=data.get("isActive") is True,
            match_weight=_weight(data.get("matchWeight"), DEFAULT_MATCH_WEIGHT),
            activity_weight=_weight(data.get("activityWeight"), DEFAULT_ACTIVITY_WEIGHT),
            point_rules=PointRules.from_dict(data.get("pointRules")),
            rules_version=_text(data.get("rulesVersion")),
        )

    @property
    def display_title(self) -> str:
        return self.title or self.id or "Season"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "isActive": self.is_active,
            "matchWeight": self.match_weight,
            "activityWeight": self.activity_weight,
            "pointRules": self.point_rules.to_dict(),
            "rulesVersion": self.rules_version,
        }


# =====================================================
# 레코드
# =====================================================

@dataclass
class MatchRecord:
    """경기 결과 레코드"""
    player_name: str = ""
    player_uid: str = ""
    competition_name: str = ""
    competition_type: str = ""
    league_type: str = ""
    rank: str = ""
    other_club_member: str = ""
    points: Optional[float] = None
    rule_version: str = ""
    status: str = STATUS_PENDING
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MatchRecord":
        return cls(
            player_name=_text(data.get("playerName")),
            player_uid=_text(data.get("playerUid")),
            competition_name=_text(data.get("competitionName")),
            competition_type=_text(data.get("type")),
            league_type=_text(data.get("leagueType")),
            rank=_text(data.get("rank")),
            other_club_member=_text(data.get("otherClubMember")),
            points=stored_points(data.get("points")),
            rule_version=_text(data.get("ruleVersion")),
            status=_text(data.get("status")) or STATUS_PENDING,
            id=data.get("id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playerName": self.player_name,
            "playerUid": self.player_uid,
            "competitionName": self.competition_name,
            "type": self.competition_type,
            "leagueType": self.league_type,
            "rank": self.rank,
            "otherClubMember": self.other_club_member,
            "points": self.points,
            "ruleVersion": self.rule_version,
            "status": self.status,
        }


@dataclass
class ActivityRecord:
    """활동 레코드"""
    player_name: str = ""
    player_uid: str = ""
    activity_type: str = ""
    points: Optional[float] = None
    rule_version: str = ""
    status: str = STATUS_PENDING
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActivityRecord":
        return cls(
            player_name=_text(data.get("playerName")),
            player_uid=_text(data.get("playerUid")),
            activity_type=_text(data.get("activityType")),
            points=stored_points(data.get("points")),
            rule_version=_text(data.get("ruleVersion")),
            status=_text(data.get("status")) or STATUS_PENDING,
            id=data.get("id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playerName": self.player_name,
            "playerUid": self.player_uid,
            "activityType": self.activity_type,
            "points": self.points,
            "ruleVersion": self.rule_version,
            "status": self.status,
        }


@dataclass
class AdjustmentRecord:
    """수동 가산/차감 레코드"""
    player_name: str = ""
    player_uid: str = ""
    apply_to: str = APPLY_TO_TOTAL
    type: str = ADJUSTMENT_BONUS
    points: float = 0.0
    note: str = ""
    date_label: str = ""
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AdjustmentRecord":
        apply_to = _text(data.get("applyTo")).strip().lower()
        if apply_to not in APPLY_TO_VALUES:
            apply_to = APPLY_TO_TOTAL
        adj_type = _text(data.get("type")).strip().lower() or ADJUSTMENT_BONUS
        return cls(
            player_name=_text(data.get("playerName")).strip(),
            player_uid=_text(data.get("playerUid")),
            apply_to=apply_to,
            type=adj_type,
            points=safe_number(data.get("points")),
            note=_text(data.get("note")),
            date_label=_text(data.get("dateLabel")),
            id=data.get("id"),
        )

    @property
    def signed_points(self) -> float:
        """차감은 항상 음수, 그 외(가산 포함)는 항상 양수"""
        if self.type == ADJUSTMENT_PENALTY:
            return -abs(self.points)
        return abs(self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "playerName": self.player_name,
            "playerUid": self.player_uid,
            "applyTo": self.apply_to,
            "type": self.type,
            "points": self.points,
            "note": self.note,
            "dateLabel": self.date_label,
        }


# =====================================================
# 리더보드
# =====================================================

@dataclass
class LeaderboardRow:
    """선수별 집계 (저장하지 않음)"""
    player_name: str
    player_uid: Optional[str] = None
    match_points_base: float = 0.0
    activity_points_base: float = 0.0
    match_adjustment: float = 0.0
    activity_adjustment: float = 0.0
    total_adjustment: float = 0.0
    matches_count: int = 0
    activities_count: int = 0
    total_points: float = 0.0
    current_rank: int = 0
    adjustments: List[AdjustmentRecord] = field(default_factory=list)

    def to_dict(self, include_details: bool = False) -> Dict[str, Any]:
        data = {
            "rank": self.current_rank,
            "playerUid": self.player_uid,
            "playerName": self.player_name,
            "matchPointsBase": self.match_points_base,
            "activityPointsBase": self.activity_points_base,
            "matchAdjustment": self.match_adjustment,
            "activityAdjustment": self.activity_adjustment,
            "totalAdjustment": self.total_adjustment,
            "matchesCount": self.matches_count,
            "activitiesCount": self.activities_count,
            "totalPoints": self.total_points,
        }
        if include_details:
            data["adjustments"] = [
                {**adj.to_dict(), "points": adj.signed_points} for adj in self.adjustments
            ]
        return data


@dataclass
class LeaderboardStats:
    """대시보드 요약"""
    total_players: int = 0
    total_matches: int = 0
    total_activities: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalPlayers": self.total_players,
            "totalMatches": self.total_matches,
            "totalActivities": self.total_activities,
        }
