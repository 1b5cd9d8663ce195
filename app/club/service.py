"""
Club Point Service

시즌 조회, 리더보드 집계, 포인트 등록/수정/삭제
"""

import asyncio
from typing import Any, Dict, Optional, Tuple

from loguru import logger

from app.config import ClubPointSettings
from ranking.calculator import (
    build_leaderboard,
    calculate_activity_points,
    calculate_match_points,
    summarize_leaderboard,
)
from ranking.exceptions import PermissionDeniedError, RecordNotFoundError, SeasonNotFoundError
from ranking.models import STATUS_PENDING, LeaderboardRow, Season
from ranking.normalizer import (
    is_known_competition_type,
    is_known_league_type,
    is_known_rank,
    resolve_activity_label,
)

from .models import (
    ActivityCreate,
    ActivityUpdate,
    AdjustmentCreate,
    MatchCreate,
    MatchUpdate,
    ProfileUpdate,
)


class ClubPointService:
    """클럽 포인트 서비스"""

    def __init__(self, db, settings: ClubPointSettings):
        self.db = db
        self.settings = settings

    # =============================================
    # 시즌 / 리더보드
    # =============================================

    async def get_season(self) -> Season:
        """활성 시즌 (없으면 기본 시즌)"""
        season = await self.db.fetch_season(self.settings.default_season_id)
        if season is None:
            logger.error(f"시즌 조회 실패: 활성 시즌과 기본 시즌({self.settings.default_season_id}) 모두 없음")
            raise SeasonNotFoundError()
        return season

    async def get_leaderboard(self) -> Dict[str, Any]:
        """
        리더보드 전체 재계산

        경기/활동/조정 컬렉션을 동시에 조회한 뒤 한 번에 집계한다.
        """
        season = await self.get_season()

        matches, activities, adjustments = await asyncio.gather(
            self.db.list_matches(season.id),
            self.db.list_activities(season.id),
            self.db.list_adjustments(season.id),
        )

        rows = build_leaderboard(matches, activities, adjustments, season)
        stats = summarize_leaderboard(rows)

        logger.info(
            f"리더보드 집계 [{season.id}]: 선수 {stats.total_players}명, "
            f"경기 {len(matches)}건, 활동 {len(activities)}건, 조정 {len(adjustments)}건"
        )

        return {"season": season, "rows": rows, "stats": stats}

    async def get_player_row(self, player_name: str) -> Tuple[Season, LeaderboardRow]:
        """선수 1명의 집계 (조정 상세 포함)"""
        board = await self.get_leaderboard()
        name = player_name.strip()
        for row in board["rows"]:
            if row.player_name == name:
                return board["season"], row
        raise RecordNotFoundError(f"리더보드에 없는 선수입니다: {name}")

    # =============================================
    # 미리보기
    # =============================================

    async def preview_match_points(
        self,
        competition_type: str,
        rank: str,
        league_type: str = "",
        other_club_member: str = ""
    ) -> Tuple[float, str]:
        season = await self.get_season()
        points = calculate_match_points(
            season.point_rules, competition_type, rank, league_type, other_club_member
        )
        return points, season.rules_version

    async def preview_activity_points(self, activity_type: str) -> Tuple[float, str]:
        season = await self.get_season()
        return calculate_activity_points(season.point_rules, activity_type), season.rules_version

    # =============================================
    # 등록
    # =============================================

    def _warn_unknown_match(self, competition_type: str, rank: str, league_type: str):
        if not is_known_competition_type(competition_type) or not is_known_rank(rank):
            logger.warning(f"규정표에 없는 경기 항목: type={competition_type}, rank={rank}")
        if league_type and not is_known_league_type(league_type):
            logger.warning(f"알 수 없는 리그: {league_type}")

    async def register_match(self, data: MatchCreate, created_by_uid: str) -> Dict[str, Any]:
        """경기 결과 등록 (등록 시점 규정으로 포인트 저장)"""
        season = await self.get_season()
        self._warn_unknown_match(data.competition_type, data.rank, data.league_type)

        points = calculate_match_points(
            season.point_rules,
            data.competition_type,
            data.rank,
            data.league_type,
            data.other_club_member,
        )
        document = {
            "playerName": data.player_name,
            "playerUid": data.player_uid or created_by_uid,
            "competitionName": data.competition_name,
            "type": data.competition_type,
            "leagueType": data.league_type,
            "rank": data.rank,
            "otherClubMember": data.other_club_member,
            "eventDate": data.event_date,
            "points": points,
            "ruleVersion": season.rules_version,
            "status": STATUS_PENDING,
        }
        record_id = await self.db.insert_record("matches", season.id, document, created_by_uid)
        logger.info(f"경기 결과 등록: {data.player_name} / {data.competition_name} = {points}점")

        return {"id": record_id, "points": points, "rule_version": season.rules_version, "status": STATUS_PENDING}

    async def register_activity(self, data: ActivityCreate, created_by_uid: str) -> Dict[str, Any]:
        """활동 등록"""
        season = await self.get_season()
        label = resolve_activity_label(data.activity_type)
        if label not in season.point_rules.activity:
            logger.warning(f"규정표에 없는 활동 항목: {data.activity_type}")

        points = calculate_activity_points(season.point_rules, data.activity_type)
        document = {
            "playerName": data.player_name,
            "playerUid": data.player_uid or created_by_uid,
            "activityType": data.activity_type,
            "eventDate": data.event_date,
            "points": points,
            "ruleVersion": season.rules_version,
            "status": STATUS_PENDING,
        }
        record_id = await self.db.insert_record("activities", season.id, document, created_by_uid)
        logger.info(f"활동 등록: {data.player_name} / {data.activity_type} = {points}점")

        return {"id": record_id, "points": points, "rule_version": season.rules_version, "status": STATUS_PENDING}

    async def register_adjustment(self, data: AdjustmentCreate, created_by_uid: str) -> Dict[str, Any]:
        """수동 가산/차감 등록"""
        season = await self.get_season()
        document = {
            "playerName": data.player_name,
            "playerUid": data.player_uid,
            "applyTo": data.apply_to.value,
            "type": data.type.value,
            "points": data.points,
            "note": data.note,
            "dateLabel": data.date_label,
        }
        record_id = await self.db.insert_record("adjustments", season.id, document, created_by_uid)
        logger.info(
            f"조정 등록: {data.player_name} / {data.apply_to.value} {data.type.value} {data.points}"
        )

        return {"id": record_id, "points": data.points, "rule_version": season.rules_version}

    # =============================================
    # 수정 / 삭제
    # =============================================

    async def _load_owned(self, kind: str, season_id: str, record_id: str, member) -> Dict[str, Any]:
        """
        레코드 조회 + 수정 권한 확인

        경기/활동은 작성자, 해당 선수, 관리자가 수정할 수 있다.
        조정(가산/차감)은 관리자만 수정/삭제할 수 있다.
        """
        document = await self.db.get_record(kind, season_id, record_id)
        if document is None:
            raise RecordNotFoundError(f"레코드를 찾을 수 없습니다: {kind}/{record_id}")

        if member.is_admin():
            return document
        if kind == "adjustments":
            logger.warning(f"조정 레코드 변경 거부: {record_id} (uid={member.uid})")
            raise PermissionDeniedError("조정 점수는 관리자만 수정할 수 있습니다.")

        owners = {document.get("createdByUid"), document.get("playerUid")}
        if member.uid not in owners:
            raise PermissionDeniedError()
        return document

    async def update_match(self, record_id: str, data: MatchUpdate, member) -> Dict[str, Any]:
        """경기 결과 수정: 현재 규정으로 포인트 재계산"""
        season = await self.get_season()
        await self._load_owned("matches", season.id, record_id, member)

        points = calculate_match_points(
            season.point_rules,
            data.competition_type,
            data.rank,
            data.league_type,
            data.other_club_member,
        )
        updates = {
            "competitionName": data.competition_name,
            "type": data.competition_type,
            "leagueType": data.league_type,
            "rank": data.rank,
            "otherClubMember": data.other_club_member,
            "points": points,
            "ruleVersion": season.rules_version,
        }
        if data.player_name is not None:
            updates["playerName"] = data.player_name
        if data.event_date is not None:
            updates["eventDate"] = data.event_date
        await self.db.update_record("matches", season.id, record_id, updates)
        logger.info(f"경기 결과 수정: {record_id} = {points}점 (규정 {season.rules_version})")

        return {"id": record_id, "points": points, "rule_version": season.rules_version}

    async def update_activity(self, record_id: str, data: ActivityUpdate, member) -> Dict[str, Any]:
        """활동 수정: 현재 규정으로 포인트 재계산"""
        season = await self.get_season()
        await self._load_owned("activities", season.id, record_id, member)

        points = calculate_activity_points(season.point_rules, data.activity_type)
        updates = {
            "activityType": data.activity_type,
            "points": points,
            "ruleVersion": season.rules_version,
        }
        if data.player_name is not None:
            updates["playerName"] = data.player_name
        if data.event_date is not None:
            updates["eventDate"] = data.event_date
        await self.db.update_record("activities", season.id, record_id, updates)
        logger.info(f"활동 수정: {record_id} = {points}점 (규정 {season.rules_version})")

        return {"id": record_id, "points": points, "rule_version": season.rules_version}

    async def delete_record(self, kind: str, record_id: str, member) -> bool:
        """레코드 삭제"""
        season = await self.get_season()
        await self._load_owned(kind, season.id, record_id, member)
        deleted = await self.db.delete_record(kind, season.id, record_id)
        logger.info(f"레코드 삭제: {kind}/{record_id} ({deleted})")
        return deleted

    # =============================================
    # 마이페이지
    # =============================================

    async def get_my_records(self, uid: str, limit: Optional[int] = None) -> Dict[str, Any]:
        """본인 최근 경기/활동"""
        season = await self.get_season()
        limit = limit or self.settings.recent_records_limit

        matches, activities = await asyncio.gather(
            self.db.list_player_records("matches", season.id, uid, limit),
            self.db.list_player_records("activities", season.id, uid, limit),
        )
        return {"season": season, "matches": matches, "activities": activities}

    async def update_my_profile(self, uid: str, data: ProfileUpdate) -> bool:
        """연락처/주소/지역 저장"""
        updated = await self.db.update_profile(
            uid, {"phone": data.phone, "address": data.address, "region": data.region}
        )
        if not updated:
            raise RecordNotFoundError(f"프로필을 찾을 수 없습니다: {uid}")
        return updated

