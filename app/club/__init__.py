"""
Club Point Module

클럽 포인트 집계 / 리더보드 API
- 경기 결과 + 활동 포인트 (시즌 가중치)
- 수동 가산/차감
- 골드 등급 이상 포인트 등록
"""

from .router import router as club_router
from .models import (
    RecordKind,
    AdjustmentTarget,
    AdjustmentType,
    MemberTier
)
from .dependencies import ClubMemberContext
from .service import ClubPointService

__all__ = [
    "club_router",
    "RecordKind",
    "AdjustmentTarget",
    "AdjustmentType",
    "MemberTier",
    "ClubMemberContext",
    "ClubPointService"
]
