"""
Club Point Dependencies

인증, 권한 체크, 서비스 주입
"""

from typing import Optional
from fastapi import Depends, HTTPException, status, Request

from app.config import ClubPointSettings, get_club_settings
from .models import MemberTier
from .service import ClubPointService

# 등급별 기본 레벨 (tierLevel이 없는 프로필)
TIER_LEVELS = {
    MemberTier.admin.value: 99,
    MemberTier.gold.value: 30,
    MemberTier.silver.value: 20,
}
DEFAULT_TIER_LEVEL = 10
ADMIN_TIER_LEVEL = 99

# 테스트용 고정 회원 (CLUB_TEST_MODE=1)
TEST_MEMBER_CONFIG = {
    "uid": "00000000-0000-0000-0000-000000000001",
    "full_name": "테스트회원",
    "tier": MemberTier.admin.value,
    "tier_level": ADMIN_TIER_LEVEL,
}


def resolve_tier_level(profile: Optional[dict]) -> int:
    """프로필 등급 레벨: tierLevel 숫자 우선, 없으면 tier 이름으로"""
    if not profile:
        return 0

    value = profile.get("tierLevel")
    if isinstance(value, bool):
        value = None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass

    tier = str(profile.get("tier") or "").lower()
    return TIER_LEVELS.get(tier, DEFAULT_TIER_LEVEL)


class ClubMemberContext:
    """클럽 회원 컨텍스트"""

    def __init__(
        self,
        uid: str,
        full_name: str,
        tier: str = MemberTier.bronze.value,
        tier_level: int = 0
    ):
        self.uid = uid
        self.full_name = full_name
        self.tier = tier
        self.tier_level = tier_level

    def is_admin(self) -> bool:
        """관리자 권한인지"""
        return self.tier == MemberTier.admin.value or self.tier_level >= ADMIN_TIER_LEVEL

    def can_write_points(self, min_tier_level: int) -> bool:
        """포인트 등록 권한 (골드 등급 이상 또는 관리자)"""
        return self.is_admin() or self.tier_level >= min_tier_level


def get_point_service(request: Request) -> ClubPointService:
    """lifespan에서 생성한 서비스"""
    service = getattr(request.app.state, "point_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="데이터베이스가 연결되지 않았습니다"
        )
    return service


async def get_current_club_member(
    request: Request,
    settings: ClubPointSettings = Depends(get_club_settings),
    service: ClubPointService = Depends(get_point_service)
) -> ClubMemberContext:
    """
    현재 로그인한 회원 정보 조회

    Supabase Auth 토큰 → profiles 테이블(등급)

    테스트 모드:
    - 환경변수 CLUB_TEST_MODE=1
    - 고정 테스트 회원(관리자)으로 자동 로그인
    """
    if settings.club_test_mode:
        return ClubMemberContext(**TEST_MEMBER_CONFIG)

    # 1. 인증 토큰 확인
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="인증이 필요합니다"
        )

    token = auth_header.split(" ")[1]

    try:
        # 2. Supabase Auth 사용자 조회
        user_id = await service.db.get_user_id(token)
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="유효하지 않은 토큰입니다"
            )

        # 3. 프로필(등급) 조회
        profile = await service.db.get_profile(user_id)
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="회원 등록이 필요합니다"
            )

        return ClubMemberContext(
            uid=user_id,
            full_name=profile.get("name") or "",
            tier=profile.get("tier") or MemberTier.bronze.value,
            tier_level=resolve_tier_level(profile)
        )

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"인증 오류: {str(e)}"
        )


def require_point_writer(
    member: ClubMemberContext = Depends(get_current_club_member),
    settings: ClubPointSettings = Depends(get_club_settings)
) -> ClubMemberContext:
    """포인트 등록 권한 필요 (골드 등급 이상)"""
    if not member.can_write_points(settings.point_writer_tier_level):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="골드 등급 이상만 포인트를 등록할 수 있습니다"
        )
    return member

