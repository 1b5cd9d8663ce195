"""
Club Point Models

Pydantic 요청/응답 모델
"""

from enum import Enum
from typing import Optional, Literal
from pydantic import BaseModel, Field, field_validator, model_validator

from ranking.models import safe_number
from ranking.normalizer import COMPETITION_TYPE_DOMESTIC, normalize_competition_type


REQUIRED_MESSAGE = "필수 항목을 확인하세요."
LEAGUE_REQUIRED_MESSAGE = "국내대회는 리그(오픈부/2부리그)를 선택해주세요."
NUMERIC_MESSAGE = "점수는 숫자만 입력하세요."


# =============================================
# Enums
# =============================================

class RecordKind(str, Enum):
    """레코드 종류"""
    matches = "matches"
    activities = "activities"
    adjustments = "adjustments"


class AdjustmentTarget(str, Enum):
    """조정 적용 대상"""
    match = "match"
    activity = "activity"
    total = "total"


class AdjustmentType(str, Enum):
    """가산/차감"""
    bonus = "bonus"
    penalty = "penalty"


class MemberTier(str, Enum):
    """회원 등급"""
    bronze = "bronze"
    silver = "silver"
    gold = "gold"
    admin = "admin"


def _required(value: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(REQUIRED_MESSAGE)
    return text


def _check_league(competition_type: str, league_type: str):
    if normalize_competition_type(competition_type) == COMPETITION_TYPE_DOMESTIC and not league_type:
        raise ValueError(LEAGUE_REQUIRED_MESSAGE)


# =============================================
# 경기 결과
# =============================================

class MatchFields(BaseModel):
    """경기 결과 공통 필드"""
    competition_name: str
    competition_type: str
    league_type: str = ""
    rank: str
    other_club_member: str = ""
    event_date: Optional[str] = None

    @field_validator("competition_name", "competition_type", "rank")
    @classmethod
    def validate_required(cls, v):
        return _required(v)

    @field_validator("league_type", "other_club_member")
    @classmethod
    def strip_optional(cls, v):
        return (v or "").strip()

    @model_validator(mode="after")
    def validate_league(self):
        _check_league(self.competition_type, self.league_type)
        return self


class MatchCreate(MatchFields):
    """경기 결과 등록"""
    player_name: str
    player_uid: str = ""

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, v):
        return _required(v)


def _optional_name(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return _required(value)


class MatchUpdate(MatchFields):
    """경기 결과 수정 (포인트 재계산). 선수 이름은 보낼 때만 변경"""
    player_name: Optional[str] = None

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, v):
        return _optional_name(v)


# =============================================
# 활동
# =============================================

class ActivityCreate(BaseModel):
    """활동 등록"""
    player_name: str
    player_uid: str = ""
    activity_type: str
    event_date: Optional[str] = None

    @field_validator("player_name", "activity_type")
    @classmethod
    def validate_required(cls, v):
        return _required(v)


class ActivityUpdate(BaseModel):
    """활동 수정 (포인트 재계산)"""
    activity_type: str
    player_name: Optional[str] = None
    event_date: Optional[str] = None

    @field_validator("activity_type")
    @classmethod
    def validate_required(cls, v):
        return _required(v)

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, v):
        return _optional_name(v)


# =============================================
# 조정
# =============================================

class AdjustmentCreate(BaseModel):
    """수동 가산/차감 등록"""
    player_name: str
    player_uid: str = ""
    apply_to: AdjustmentTarget = AdjustmentTarget.total
    type: AdjustmentType = AdjustmentType.bonus
    points: float
    note: str = ""
    date_label: str = ""

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, v):
        return _required(v)

    @field_validator("points", mode="before")
    @classmethod
    def validate_points(cls, v):
        if isinstance(v, bool):
            raise ValueError(NUMERIC_MESSAGE)
        if isinstance(v, (int, float)):
            return float(v)
        text = str(v or "").strip()
        if not text:
            raise ValueError(REQUIRED_MESSAGE)
        try:
            float(text)
        except ValueError:
            raise ValueError(NUMERIC_MESSAGE)
        return safe_number(text)


# =============================================
# 미리보기 / 프로필
# =============================================

class PointPreviewRequest(BaseModel):
    """저장 없이 포인트 계산"""
    kind: Literal["match", "activity"] = "match"
    competition_type: str = ""
    rank: str = ""
    league_type: str = ""
    other_club_member: str = ""
    activity_type: str = ""


class ProfileUpdate(BaseModel):
    """마이페이지 프로필 수정"""
    phone: str = ""
    address: str = ""
    region: str

    @field_validator("region")
    @classmethod
    def validate_region(cls, v):
        return _required(v)


# =============================================
# 응답
# =============================================

class PointPreviewResponse(BaseModel):
    points: float
    rule_version: str = ""


class RecordSaved(BaseModel):
    """저장 결과"""
    id: Optional[str] = None
    points: float = 0.0
    rule_version: str = ""
    status: Optional[str] = None


class SeasonSummary(BaseModel):
    """시즌 요약"""
    id: str
    title: str
    is_active: bool = False
    match_weight: float
    activity_weight: float
    rules_version: str = ""
    point_rules: dict = Field(default_factory=dict)
