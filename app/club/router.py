"""
Club Point Router

클럽 포인트 API
- 시즌 / 리더보드
- 포인트 미리보기
- 경기 결과, 활동, 조정 등록
- 본인 레코드 수정/삭제 (마이페이지)
"""

from fastapi import APIRouter, Depends, HTTPException, status

from ranking.exceptions import (
    ClubPointError,
    PermissionDeniedError,
    RecordNotFoundError,
    SeasonNotFoundError,
)
from .dependencies import (
    ClubMemberContext,
    get_current_club_member,
    get_point_service,
    require_point_writer,
)
from .models import (
    ActivityCreate,
    ActivityUpdate,
    AdjustmentCreate,
    MatchCreate,
    MatchUpdate,
    PointPreviewRequest,
    PointPreviewResponse,
    ProfileUpdate,
    RecordKind,
    RecordSaved,
    SeasonSummary,
)
from .service import ClubPointService

router = APIRouter(prefix="/club", tags=["Club Point"])


def _to_http(error: ClubPointError) -> HTTPException:
    """포인트 예외 → HTTP 응답"""
    if isinstance(error, (SeasonNotFoundError, RecordNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


def _season_header(season) -> dict:
    return {
        "id": season.id,
        "title": season.display_title,
        "rulesVersion": season.rules_version,
        "matchWeight": season.match_weight,
        "activityWeight": season.activity_weight,
    }


# =============================================
# 시즌 / 리더보드
# =============================================

@router.get("/season", response_model=SeasonSummary)
async def get_season(service: ClubPointService = Depends(get_point_service)):
    """활성 시즌 요약 + 규정표"""
    try:
        season = await service.get_season()
    except ClubPointError as e:
        raise _to_http(e)

    return SeasonSummary(
        id=season.id,
        title=season.display_title,
        is_active=season.is_active,
        match_weight=season.match_weight,
        activity_weight=season.activity_weight,
        rules_version=season.rules_version,
        point_rules=season.point_rules.to_dict(),
    )


@router.get("/leaderboard")
async def get_leaderboard(service: ClubPointService = Depends(get_point_service)):
    """
    시즌 리더보드

    총점 = (경기 포인트 × 경기 가중치) + (활동 포인트 × 활동 가중치) + 조정 점수
    """
    try:
        board = await service.get_leaderboard()
    except ClubPointError as e:
        raise _to_http(e)

    return {
        "season": _season_header(board["season"]),
        "stats": board["stats"].to_dict(),
        "leaderboard": [row.to_dict() for row in board["rows"]],
    }


@router.get("/leaderboard/{player_name}")
async def get_player_leaderboard(
    player_name: str,
    service: ClubPointService = Depends(get_point_service)
):
    """선수 1명 상세 (조정 내역 포함)"""
    try:
        season, row = await service.get_player_row(player_name)
    except ClubPointError as e:
        raise _to_http(e)

    return {
        "season": _season_header(season),
        "player": row.to_dict(include_details=True),
    }


@router.post("/points/preview", response_model=PointPreviewResponse)
async def preview_points(
    request: PointPreviewRequest,
    service: ClubPointService = Depends(get_point_service)
):
    """저장하지 않고 포인트만 계산"""
    try:
        if request.kind == "activity":
            points, rule_version = await service.preview_activity_points(request.activity_type)
        else:
            points, rule_version = await service.preview_match_points(
                request.competition_type,
                request.rank,
                request.league_type,
                request.other_club_member,
            )
    except ClubPointError as e:
        raise _to_http(e)

    return PointPreviewResponse(points=points, rule_version=rule_version)


# =============================================
# 등록 (골드 등급 이상)
# =============================================

@router.post("/matches", response_model=RecordSaved, status_code=status.HTTP_201_CREATED)
async def create_match(
    data: MatchCreate,
    member: ClubMemberContext = Depends(require_point_writer),
    service: ClubPointService = Depends(get_point_service)
):
    """경기 결과 등록"""
    try:
        saved = await service.register_match(data, member.uid)
    except ClubPointError as e:
        raise _to_http(e)
    return RecordSaved(**saved)


@router.post("/activities", response_model=RecordSaved, status_code=status.HTTP_201_CREATED)
async def create_activity(
    data: ActivityCreate,
    member: ClubMemberContext = Depends(require_point_writer),
    service: ClubPointService = Depends(get_point_service)
):
    """활동 등록"""
    try:
        saved = await service.register_activity(data, member.uid)
    except ClubPointError as e:
        raise _to_http(e)
    return RecordSaved(**saved)


@router.post("/adjustments", response_model=RecordSaved, status_code=status.HTTP_201_CREATED)
async def create_adjustment(
    data: AdjustmentCreate,
    member: ClubMemberContext = Depends(require_point_writer),
    service: ClubPointService = Depends(get_point_service)
):
    """가산/차감 등록"""
    try:
        saved = await service.register_adjustment(data, member.uid)
    except ClubPointError as e:
        raise _to_http(e)
    return RecordSaved(**saved)


# =============================================
# 수정 / 삭제 (본인 또는 관리자)
# =============================================

@router.put("/matches/{record_id}", response_model=RecordSaved)
async def update_match(
    record_id: str,
    data: MatchUpdate,
    member: ClubMemberContext = Depends(get_current_club_member),
    service: ClubPointService = Depends(get_point_service)
):
    """경기 결과 수정 (현재 규정으로 재계산)"""
    try:
        saved = await service.update_match(record_id, data, member)
    except ClubPointError as e:
        raise _to_http(e)
    return RecordSaved(**saved)


@router.put("/activities/{record_id}", response_model=RecordSaved)
async def update_activity(
    record_id: str,
    data: ActivityUpdate,
    member: ClubMemberContext = Depends(get_current_club_member),
    service: ClubPointService = Depends(get_point_service)
):
    """활동 수정 (현재 규정으로 재계산)"""
    try:
        saved = await service.update_activity(record_id, data, member)
    except ClubPointError as e:
        raise _to_http(e)
    return RecordSaved(**saved)


@router.delete("/{kind}/{record_id}")
async def delete_record(
    kind: RecordKind,
    record_id: str,
    member: ClubMemberContext = Depends(get_current_club_member),
    service: ClubPointService = Depends(get_point_service)
):
    """레코드 삭제"""
    try:
        deleted = await service.delete_record(kind.value, record_id, member)
    except ClubPointError as e:
        raise _to_http(e)
    return {"success": deleted, "kind": kind.value, "id": record_id}


# =============================================
# 마이페이지
# =============================================

@router.get("/me/records")
async def get_my_records(
    member: ClubMemberContext = Depends(get_current_club_member),
    service: ClubPointService = Depends(get_point_service)
):
    """본인 최근 경기/활동"""
    try:
        records = await service.get_my_records(member.uid)
    except ClubPointError as e:
        raise _to_http(e)

    return {
        "season": _season_header(records["season"]),
        "member": {
            "uid": member.uid,
            "name": member.full_name,
            "tier": member.tier,
            "tierLevel": member.tier_level,
        },
        "matches": records["matches"],
        "activities": records["activities"],
    }


@router.put("/me/profile")
async def update_my_profile(
    data: ProfileUpdate,
    member: ClubMemberContext = Depends(get_current_club_member),
    service: ClubPointService = Depends(get_point_service)
):
    """연락처/주소/지역 저장"""
    try:
        await service.update_my_profile(member.uid, data)
    except ClubPointError as e:
        raise _to_http(e)
    return {"success": True}
