"""
Supabase 데이터베이스 클라이언트 (클럽 포인트)

시즌별 경기/활동/조정 레코드와 회원 프로필을 조회/저장한다.
클라이언트는 진입점(서버 lifespan, CLI)에서 한 번 생성해서 주입한다.
"""
import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from supabase import create_client, Client
from loguru import logger

from app.config import SupabaseConfig
from ranking.models import (
    STATUS_CONFIRMED,
    ActivityRecord,
    AdjustmentRecord,
    MatchRecord,
    Season,
)


# 레코드 종류 → 테이블
RECORD_TABLES = {
    "matches": "club_matches",
    "activities": "club_activities",
    "adjustments": "club_adjustments",
}

# 문서 필드(camelCase) → 컬럼
SEASON_COLUMNS = {
    "title": "title",
    "isActive": "is_active",
    "matchWeight": "match_weight",
    "activityWeight": "activity_weight",
    "pointRules": "point_rules",
    "rulesVersion": "rules_version",
}

MATCH_COLUMNS = {
    "playerName": "player_name",
    "playerUid": "player_uid",
    "competitionName": "competition_name",
    "type": "competition_type",
    "leagueType": "league_type",
    "rank": "rank",
    "otherClubMember": "other_club_member",
    "eventDate": "event_date",
    "points": "points",
    "ruleVersion": "rule_version",
    "status": "status",
}

ACTIVITY_COLUMNS = {
    "playerName": "player_name",
    "playerUid": "player_uid",
    "activityType": "activity_type",
    "eventDate": "event_date",
    "points": "points",
    "ruleVersion": "rule_version",
    "status": "status",
}

ADJUSTMENT_COLUMNS = {
    "playerName": "player_name",
    "playerUid": "player_uid",
    "applyTo": "apply_to",
    "type": "adjustment_type",
    "points": "points",
    "note": "note",
    "dateLabel": "date_label",
}

RECORD_COLUMNS = {
    "matches": MATCH_COLUMNS,
    "activities": ACTIVITY_COLUMNS,
    "adjustments": ADJUSTMENT_COLUMNS,
}

PROFILE_COLUMNS = {
    "name": "name",
    "email": "email",
    "tier": "tier",
    "tierLevel": "tier_level",
    "phone": "phone",
    "address": "address",
    "region": "region",
}


def create_supabase_client(config: SupabaseConfig) -> Client:
    """Supabase 클라이언트 생성 (진입점에서 한 번만 호출)"""
    if not config.supabase_url or not config.supabase_key:
        raise ValueError("SUPABASE_URL과 SUPABASE_KEY 환경변수를 설정해주세요")
    return create_client(config.supabase_url, config.supabase_key)


def row_to_document(row: Dict[str, Any], columns: Dict[str, str]) -> Dict[str, Any]:
    """DB 행 → 문서(camelCase) 딕셔너리"""
    document = {field: row.get(column) for field, column in columns.items() if column in row}
    if "id" in row:
        document["id"] = row["id"]
    return document


def document_to_row(document: Dict[str, Any], columns: Dict[str, str]) -> Dict[str, Any]:
    """문서(camelCase) 딕셔너리 → DB 행"""
    return {column: document[field] for field, column in columns.items() if field in document}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ClubPointDB:
    """클럽 포인트 Supabase 저장소"""

    def __init__(self, client: Client):
        self.client = client

    async def _execute(self, query):
        # supabase-py는 동기 호출이므로 스레드에서 실행 (동시 조회용)
        return await asyncio.to_thread(query.execute)

    # ==================== 시즌 ====================

    async def get_active_season(self) -> Optional[Season]:
        """is_active 시즌 1건"""
        result = await self._execute(
            self.client.table("seasons").select("*").eq("is_active", True).limit(1)
        )
        if not result.data:
            return None
        row = result.data[0]
        return Season.from_dict(row_to_document(row, SEASON_COLUMNS), season_id=row["id"])

    async def get_season(self, season_id: str) -> Optional[Season]:
        """시즌 ID로 조회"""
        result = await self._execute(
            self.client.table("seasons").select("*").eq("id", season_id).limit(1)
        )
        if not result.data:
            return None
        row = result.data[0]
        return Season.from_dict(row_to_document(row, SEASON_COLUMNS), season_id=row["id"])

    async def fetch_season(self, default_season_id: str) -> Optional[Season]:
        """활성 시즌 → 기본 시즌 순으로 조회"""
        season = await self.get_active_season()
        if season:
            return season

        logger.warning(f"활성 시즌 없음, 기본 시즌 조회: {default_season_id}")
        return await self.get_season(default_season_id)

    # ==================== 레코드 조회 ====================

    async def _list_documents(self, kind: str, season_id: str) -> List[Dict[str, Any]]:
        """확정 레코드 우선, 없으면 전체"""
        table = RECORD_TABLES[kind]
        columns = RECORD_COLUMNS[kind]

        rows: List[Dict[str, Any]] = []
        if "status" in columns.values():
            result = await self._execute(
                self.client.table(table).select("*")
                .eq("season_id", season_id)
                .eq("status", STATUS_CONFIRMED)
            )
            rows = result.data or []

        if not rows:
            result = await self._execute(
                self.client.table(table).select("*").eq("season_id", season_id)
            )
            rows = result.data or []

        return [row_to_document(row, columns) for row in rows]

    async def list_matches(self, season_id: str) -> List[MatchRecord]:
        documents = await self._list_documents("matches", season_id)
        return [MatchRecord.from_dict(d) for d in documents]

    async def list_activities(self, season_id: str) -> List[ActivityRecord]:
        documents = await self._list_documents("activities", season_id)
        return [ActivityRecord.from_dict(d) for d in documents]

    async def list_adjustments(self, season_id: str) -> List[AdjustmentRecord]:
        documents = await self._list_documents("adjustments", season_id)
        return [AdjustmentRecord.from_dict(d) for d in documents]

    async def list_player_records(
        self,
        kind: str,
        season_id: str,
        player_uid: str,
        limit: int = 5
    ) -> List[Dict[str, Any]]:
        """회원 본인의 최근 레코드 (최신순)"""
        result = await self._execute(
            self.client.table(RECORD_TABLES[kind]).select("*")
            .eq("season_id", season_id)
            .eq("player_uid", player_uid)
            .order("created_at", desc=True)
            .limit(limit)
        )
        documents = []
        for row in result.data or []:
            document = row_to_document(row, RECORD_COLUMNS[kind])
            document["createdAt"] = row.get("created_at")
            document["createdByUid"] = row.get("created_by_uid")
            documents.append(document)
        return documents

    async def get_record(self, kind: str, season_id: str, record_id: str) -> Optional[Dict[str, Any]]:
        """레코드 1건 (작성자 포함)"""
        result = await self._execute(
            self.client.table(RECORD_TABLES[kind]).select("*")
            .eq("season_id", season_id)
            .eq("id", record_id)
            .limit(1)
        )
        if not result.data:
            return None
        row = result.data[0]
        document = row_to_document(row, RECORD_COLUMNS[kind])
        document["createdByUid"] = row.get("created_by_uid")
        return document

    # ==================== 레코드 저장 ====================

    async def insert_record(
        self,
        kind: str,
        season_id: str,
        document: Dict[str, Any],
        created_by_uid: str = ""
    ) -> Optional[str]:
        """레코드 저장 후 ID 반환"""
        row = document_to_row(document, RECORD_COLUMNS[kind])
        row.update({
            "season_id": season_id,
            "created_by_uid": created_by_uid,
            "created_at": _now(),
        })

        try:
            result = await self._execute(self.client.table(RECORD_TABLES[kind]).insert(row))
        except Exception as e:
            logger.error(f"{kind} 저장 오류: {e}")
            raise

        if result.data:
            return result.data[0].get("id")
        return None

    async def update_record(
        self,
        kind: str,
        season_id: str,
        record_id: str,
        document: Dict[str, Any]
    ) -> bool:
        """레코드 수정"""
        row = document_to_row(document, RECORD_COLUMNS[kind])
        row["updated_at"] = _now()

        try:
            result = await self._execute(
                self.client.table(RECORD_TABLES[kind]).update(row)
                .eq("season_id", season_id)
                .eq("id", record_id)
            )
        except Exception as e:
            logger.error(f"{kind} 수정 오류: {e}")
            raise

        return len(result.data or []) > 0

    async def delete_record(self, kind: str, season_id: str, record_id: str) -> bool:
        """레코드 삭제"""
        try:
            result = await self._execute(
                self.client.table(RECORD_TABLES[kind]).delete()
                .eq("season_id", season_id)
                .eq("id", record_id)
            )
        except Exception as e:
            logger.error(f"{kind} 삭제 오류: {e}")
            raise

        return len(result.data or []) > 0

    # ==================== 프로필 ====================

    async def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        """회원 프로필 (등급 포함)"""
        result = await self._execute(
            self.client.table("profiles").select("*").eq("id", uid).limit(1)
        )
        if not result.data:
            return None
        return row_to_document(result.data[0], PROFILE_COLUMNS)

    async def update_profile(self, uid: str, fields: Dict[str, Any]) -> bool:
        """연락처/주소/지역 수정"""
        row = document_to_row(fields, PROFILE_COLUMNS)
        row["last_login_at"] = _now()
        result = await self._execute(self.client.table("profiles").update(row).eq("id", uid))
        return len(result.data or []) > 0

    async def get_user_id(self, token: str) -> Optional[str]:
        """Supabase Auth 토큰 → 사용자 ID"""
        response = await asyncio.to_thread(self.client.auth.get_user, token)
        if not response or not response.user:
            return None
        return response.user.id
