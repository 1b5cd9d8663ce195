"""
클럽 포인트 입력값 정규화 모듈
- 대회 유형, 성적, 리그, 타클럽 여부 정규화
- 활동 항목 별칭 → 규정표 카테고리 변환
"""
from typing import Any, Optional
import re


# =============================================================================
# 정규화 매핑 테이블 (Single Source of Truth)
# =============================================================================

COMPETITION_TYPE_INTERNATIONAL = "국제대회"
COMPETITION_TYPE_DOMESTIC = "국내대회"

RANK_WINNER = "winner"
RANK_RUNNER_UP = "runner-up"
RANK_THIRD = "third"
RANK_PARTICIPATION = "participation"

LEAGUE_OPEN = "open"
LEAGUE_DIVISION2 = "division2"

# 비교는 normalize_text() 결과로 하므로 키도 공백/하이픈 없는 소문자
COMPETITION_TYPE_SYNONYMS = {
    COMPETITION_TYPE_INTERNATIONAL: {"국제", "국제대회", "international", "intl", "inter"},
    COMPETITION_TYPE_DOMESTIC: {"국내", "국내대회", "domestic", "local"},
}

RANK_SYNONYMS = {
    RANK_WINNER: {"winner", "win", "champ", "우승", "1", "1등", "1위", "first"},
    RANK_RUNNER_UP: {"runnerup", "ru", "준우승", "2", "2등", "2위", "second"},
    RANK_THIRD: {"third", "3", "3등", "3위", "bronze", "동", "동메달"},
    RANK_PARTICIPATION: {"participation", "참가", "참여"},
}

LEAGUE_TYPE_SYNONYMS = {
    LEAGUE_OPEN: {"open", "오픈", "오픈부", "open부"},
    LEAGUE_DIVISION2: {"2", "2부", "2부리그", "division2", "d2", "div2", "2nd"},
}

OTHER_CLUB_TRUE = {"예", "yes", "y", "true", "1", "on"}
OTHER_CLUB_FALSE = {"아니오", "아니요", "no", "n", "false", "0", "off"}

# 세부 활동 항목 → 규정표 카테고리
ACTIVITY_ALIAS = {
    "정기모임": "정기모임",
    "훈련": "훈련",
    "지각": "지각",
    "조퇴": "조퇴",
    "클럽내부대회": "내부리그 운영",
    "외부교류전": "외부교류전",
    "외부대회참여": "외부교류전",
    "대회스태프": "봉사/운영",
    "행사참여": "봉사/운영",
    "신입회원교육": "홍보/콘텐츠",
    "멘토링": "홍보/콘텐츠",
    "장비정리": "봉사/운영",
    "코트정리": "봉사/운영",
    "홍보참여": "홍보/콘텐츠",
    "운영진활동": "내부리그 운영",
    "신규회원추천": "홍보/콘텐츠",
    "클럽주관대회입상_우승": "내부리그 운영",
    "클럽주관대회입상_준우승": "내부리그 운영",
    "클럽주관대회입상_3등": "내부리그 운영",
    "외부대회입상_우승": "외부교류전",
    "외부대회입상_준우승": "외부교류전",
    "외부대회입상_3등": "외부교류전",
    "MVP": "홍보/콘텐츠",
    "무단불참3회": "봉사/운영",
    "비매너": "봉사/운영",
    "기물파손": "봉사/운영",
}

_STRIP_PATTERN = re.compile(r"[\s_\-]+")


# =============================================================================
# 정규화 함수들
# =============================================================================

def _raw(value: Any) -> str:
    """None → "", 그 외는 문자열 원본"""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_text(value: Any) -> str:
    """비교용 정규화: 앞뒤 공백 제거, 소문자, 공백/언더스코어/하이픈 제거"""
    return _STRIP_PATTERN.sub("", _raw(value).strip().lower())


def _lookup(value: Any, synonyms: dict) -> Optional[str]:
    key = normalize_text(value)
    for canonical, variants in synonyms.items():
        if key in variants:
            return canonical
    return None


def normalize_competition_type(value: Any) -> str:
    """대회 유형 정규화: 국제/international → 국제대회, 국내/domestic → 국내대회

    알 수 없는 값은 원본 그대로 반환 (규정표 조회 시 0점)
    """
    return _lookup(value, COMPETITION_TYPE_SYNONYMS) or _raw(value)


def normalize_rank(value: Any) -> str:
    """성적 정규화: winner / runner-up / third / participation"""
    return _lookup(value, RANK_SYNONYMS) or _raw(value)


def normalize_league_type(value: Any) -> str:
    """리그 정규화: open / division2 (국내대회에서만 의미 있음)"""
    return _lookup(value, LEAGUE_TYPE_SYNONYMS) or _raw(value)


def normalize_other_club_flag(value: Any) -> bool:
    """복식 타클럽 팀 여부: 긍정 응답만 True, 나머지는 모두 False"""
    if isinstance(value, bool):
        return value
    return normalize_text(value) in OTHER_CLUB_TRUE


def resolve_activity_label(value: Any) -> str:
    """활동 항목 → 규정표 키. 별칭이 없으면 입력값 그대로 사용"""
    label = _raw(value)
    return ACTIVITY_ALIAS.get(label, label)


# =============================================================================
# 인식 여부 (경고용)
# =============================================================================

def is_known_competition_type(value: Any) -> bool:
    return _lookup(value, COMPETITION_TYPE_SYNONYMS) is not None


def is_known_rank(value: Any) -> bool:
    return _lookup(value, RANK_SYNONYMS) is not None


def is_known_league_type(value: Any) -> bool:
    return _lookup(value, LEAGUE_TYPE_SYNONYMS) is not None


def is_known_other_club_flag(value: Any) -> bool:
    key = normalize_text(value)
    return key in OTHER_CLUB_TRUE or key in OTHER_CLUB_FALSE
