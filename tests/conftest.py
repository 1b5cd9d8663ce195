"""
Pytest configuration and fixtures for Club Point tests
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ranking.calculator import select_confirmed
from ranking.models import ActivityRecord, AdjustmentRecord, MatchRecord, Season


RECORD_TYPES = {
    "matches": MatchRecord,
    "activities": ActivityRecord,
    "adjustments": AdjustmentRecord,
}


class FakeClubPointDB:
    """메모리 기반 ClubPointDB (Supabase 없이 서비스/라우터 테스트)"""

    def __init__(self, seasons=None, profiles=None, tokens=None):
        self.seasons = list(seasons or [])
        self.records = {kind: [] for kind in RECORD_TYPES}
        self.profiles = dict(profiles or {})
        self.tokens = dict(tokens or {})
        self._counter = 0

    def add(self, kind, season_id, document, created_by_uid=""):
        self._counter += 1
        record_id = f"{kind}-{self._counter}"
        self.records[kind].append({
            **document,
            "id": record_id,
            "seasonId": season_id,
            "createdByUid": created_by_uid,
            "createdAt": self._counter,
        })
        return record_id

    def _find(self, kind, season_id, record_id):
        for record in self.records[kind]:
            if record["seasonId"] == season_id and record["id"] == record_id:
                return record
        return None

    async def get_active_season(self):
        return next((s for s in self.seasons if s.is_active), None)

    async def get_season(self, season_id):
        return next((s for s in self.seasons if s.id == season_id), None)

    async def fetch_season(self, default_season_id):
        season = await self.get_active_season()
        if season:
            return season
        return await self.get_season(default_season_id)

    def _list(self, kind, season_id):
        documents = [r for r in self.records[kind] if r["seasonId"] == season_id]
        return [RECORD_TYPES[kind].from_dict(d) for d in select_confirmed(documents)]

    async def list_matches(self, season_id):
        return self._list("matches", season_id)

    async def list_activities(self, season_id):
        return self._list("activities", season_id)

    async def list_adjustments(self, season_id):
        return self._list("adjustments", season_id)

    async def list_player_records(self, kind, season_id, player_uid, limit=5):
        records = [
            r for r in self.records[kind]
            if r["seasonId"] == season_id and r.get("playerUid") == player_uid
        ]
        records.sort(key=lambda r: r["createdAt"], reverse=True)
        return [dict(r) for r in records[:limit]]

    async def get_record(self, kind, season_id, record_id):
        record = self._find(kind, season_id, record_id)
        return dict(record) if record else None

    async def insert_record(self, kind, season_id, document, created_by_uid=""):
        return self.add(kind, season_id, document, created_by_uid)

    async def update_record(self, kind, season_id, record_id, document):
        record = self._find(kind, season_id, record_id)
        if record is None:
            return False
        record.update(document)
        return True

    async def delete_record(self, kind, season_id, record_id):
        record = self._find(kind, season_id, record_id)
        if record is None:
            return False
        self.records[kind].remove(record)
        return True

    async def get_profile(self, uid):
        return self.profiles.get(uid)

    async def update_profile(self, uid, fields):
        if uid not in self.profiles:
            return False
        self.profiles[uid].update(fields)
        return True

    async def get_user_id(self, token):
        return self.tokens.get(token)


@pytest.fixture(scope="function")
def sample_point_rules():
    """시즌 규정표"""
    return {
        "match": {
            "국제대회": {"winner": 10, "runner-up": 7, "third": 5, "participation": 2},
            "국내대회": {"winner": 3, "runner-up": 2, "third": 1, "participation": 0.5},
        },
        "activity": {
            "정기모임": 1,
            "훈련": 1,
            "지각": -1,
            "조퇴": -0.5,
            "내부리그 운영": 2,
            "외부교류전": 2,
            "봉사/운영": 1.5,
            "홍보/콘텐츠": 1,
        },
    }


@pytest.fixture(scope="function")
def sample_season_data(sample_point_rules):
    """활성 시즌 (가중치 0.5 / 0.5)"""
    return {
        "id": "2025",
        "title": "2025 시즌",
        "isActive": True,
        "matchWeight": 0.5,
        "activityWeight": 0.5,
        "pointRules": sample_point_rules,
        "rulesVersion": "v1",
    }


@pytest.fixture(scope="function")
def sample_season(sample_season_data):
    return Season.from_dict(sample_season_data)


@pytest.fixture(scope="function")
def fake_db(sample_season):
    """시즌 1개 + 회원 프로필이 있는 메모리 DB"""
    return FakeClubPointDB(
        seasons=[sample_season],
        profiles={
            "uid-gold": {"name": "김골드", "tier": "gold", "tierLevel": 30},
            "uid-silver": {"name": "이실버", "tier": "silver", "tierLevel": 20},
            "uid-admin": {"name": "박관리", "tier": "admin"},
        },
        tokens={
            "token-gold": "uid-gold",
            "token-silver": "uid-silver",
            "token-admin": "uid-admin",
        },
    )


@pytest.fixture(scope="function")
def club_settings():
    from app.config import ClubPointSettings
    return ClubPointSettings(
        default_season_id="2025",
        point_writer_tier_level=30,
        recent_records_limit=5,
        club_test_mode=False,
    )
