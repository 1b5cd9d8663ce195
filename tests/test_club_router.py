"""
Club Point Router Tests - API 상태 코드 / 권한 테스트
"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.club import club_router
from app.club.service import ClubPointService
from app.config import ClubPointSettings, get_club_settings

from conftest import FakeClubPointDB

GOLD = {"Authorization": "Bearer token-gold"}
SILVER = {"Authorization": "Bearer token-silver"}
ADMIN = {"Authorization": "Bearer token-admin"}


def _make_client(db, settings):
    app = FastAPI()
    app.include_router(club_router, prefix="/api")
    app.state.point_service = ClubPointService(db, settings) if db is not None else None
    app.dependency_overrides[get_club_settings] = lambda: settings
    return TestClient(app)


@pytest.fixture
def client(fake_db, club_settings):
    return _make_client(fake_db, club_settings)


MATCH_BODY = {
    "player_name": "A",
    "player_uid": "uid-a",
    "competition_name": "시장배",
    "competition_type": "국내대회",
    "league_type": "2부리그",
    "rank": "winner",
}


class TestSeasonAndLeaderboard:
    """시즌 / 리더보드 조회"""

    def test_season(self, client):
        response = client.get("/api/club/season")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "2025"
        assert data["match_weight"] == 0.5
        assert data["point_rules"]["activity"]["정기모임"] == 1

    def test_leaderboard(self, client, fake_db):
        fake_db.add("matches", "2025", {"playerName": "A", "type": "국내대회", "rank": "winner", "leagueType": "open"})
        fake_db.add("activities", "2025", {"playerName": "A", "activityType": "정기모임"})

        response = client.get("/api/club/leaderboard")
        assert response.status_code == 200
        data = response.json()
        assert data["season"]["id"] == "2025"
        assert data["stats"]["totalPlayers"] == 1
        assert data["leaderboard"][0]["totalPoints"] == 2.0
        assert data["leaderboard"][0]["rank"] == 1

    def test_leaderboard_no_season(self, club_settings):
        client = _make_client(FakeClubPointDB(), club_settings)
        response = client.get("/api/club/leaderboard")
        assert response.status_code == 404
        assert response.json()["detail"] == "활성 시즌 정보를 찾을 수 없습니다."

    def test_player_detail(self, client, fake_db):
        fake_db.add("adjustments", "2025", {"playerName": "A", "applyTo": "match", "type": "penalty", "points": 3})

        response = client.get("/api/club/leaderboard/A")
        assert response.status_code == 200
        player = response.json()["player"]
        assert player["matchAdjustment"] == -3
        assert player["adjustments"][0]["points"] == -3

    def test_player_detail_missing(self, client):
        assert client.get("/api/club/leaderboard/없는선수").status_code == 404

    def test_preview(self, client):
        response = client.post("/api/club/points/preview", json={
            "kind": "match",
            "competition_type": "국내대회",
            "rank": "winner",
            "league_type": "2부",
        })
        assert response.status_code == 200
        assert response.json()["points"] == 0.9

        response = client.post("/api/club/points/preview", json={"kind": "activity", "activity_type": "지각"})
        assert response.json()["points"] == -1

    def test_no_database(self, club_settings):
        client = _make_client(None, club_settings)
        assert client.get("/api/club/leaderboard").status_code == 503


class TestRegistration:
    """등록 권한 / 검증"""

    def test_requires_auth(self, client):
        assert client.post("/api/club/matches", json=MATCH_BODY).status_code == 401

    def test_invalid_token(self, client):
        response = client.post("/api/club/matches", json=MATCH_BODY, headers={"Authorization": "Bearer bad"})
        assert response.status_code == 401

    def test_silver_forbidden(self, client):
        assert client.post("/api/club/matches", json=MATCH_BODY, headers=SILVER).status_code == 403

    def test_gold_can_register(self, client, fake_db):
        response = client.post("/api/club/matches", json=MATCH_BODY, headers=GOLD)
        assert response.status_code == 201
        data = response.json()
        assert data["points"] == 0.9
        assert data["status"] == "pending"
        assert fake_db.records["matches"][0]["createdByUid"] == "uid-gold"

    def test_admin_tier_without_level(self, client):
        """tierLevel 없는 admin 프로필도 등록 가능"""
        assert client.post("/api/club/matches", json=MATCH_BODY, headers=ADMIN).status_code == 201

    def test_domestic_requires_league(self, client):
        body = {**MATCH_BODY, "league_type": ""}
        response = client.post("/api/club/matches", json=body, headers=GOLD)
        assert response.status_code == 422

    def test_missing_required_field(self, client):
        body = {**MATCH_BODY, "competition_name": "  "}
        assert client.post("/api/club/matches", json=body, headers=GOLD).status_code == 422

    def test_activity(self, client):
        response = client.post(
            "/api/club/activities",
            json={"player_name": "A", "activity_type": "클럽내부대회"},
            headers=GOLD,
        )
        assert response.status_code == 201
        assert response.json()["points"] == 2

    def test_adjustment_non_numeric(self, client):
        response = client.post(
            "/api/club/adjustments",
            json={"player_name": "A", "points": "abc"},
            headers=GOLD,
        )
        assert response.status_code == 422

    def test_adjustment_bad_target(self, client):
        response = client.post(
            "/api/club/adjustments",
            json={"player_name": "A", "points": 1, "apply_to": "etc"},
            headers=GOLD,
        )
        assert response.status_code == 422

    def test_adjustment(self, client, fake_db):
        response = client.post(
            "/api/club/adjustments",
            json={"player_name": "A", "points": "5", "apply_to": "total", "type": "bonus", "note": "MVP"},
            headers=GOLD,
        )
        assert response.status_code == 201
        assert fake_db.records["adjustments"][0]["points"] == 5

    def test_test_mode(self, fake_db):
        settings = ClubPointSettings(default_season_id="2025", club_test_mode=True)
        client = _make_client(fake_db, settings)
        assert client.post("/api/club/matches", json=MATCH_BODY).status_code == 201


class TestEditAndDelete:
    """수정 / 삭제 권한"""

    def test_update_own_activity(self, client, fake_db):
        record_id = fake_db.add("activities", "2025", {"playerName": "이실버", "playerUid": "uid-silver"}, "uid-gold")
        response = client.put(
            f"/api/club/activities/{record_id}", json={"activity_type": "훈련"}, headers=SILVER
        )
        assert response.status_code == 200
        assert response.json()["rule_version"] == "v1"

    def test_update_others_forbidden(self, client, fake_db):
        record_id = fake_db.add("matches", "2025", {"playerName": "A", "playerUid": "uid-a"}, "uid-gold")
        body = {"competition_name": "c", "competition_type": "국제대회", "rank": "third"}
        response = client.put(f"/api/club/matches/{record_id}", json=body, headers=SILVER)
        assert response.status_code == 403

    def test_admin_update(self, client, fake_db):
        record_id = fake_db.add("matches", "2025", {"playerName": "A", "playerUid": "uid-a"}, "uid-gold")
        body = {"competition_name": "c", "competition_type": "국제대회", "rank": "third"}
        response = client.put(f"/api/club/matches/{record_id}", json=body, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["points"] == 5

    def test_delete(self, client, fake_db):
        record_id = fake_db.add("matches", "2025", {"playerName": "김골드", "playerUid": "uid-gold"}, "uid-gold")
        response = client.delete(f"/api/club/matches/{record_id}", headers=GOLD)
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_delete_missing(self, client):
        assert client.delete("/api/club/matches/nope", headers=ADMIN).status_code == 404

    def test_delete_unknown_kind(self, client):
        assert client.delete("/api/club/things/1", headers=ADMIN).status_code == 422

    def test_penalized_player_cannot_delete_adjustment(self, client, fake_db):
        """차감 대상 본인의 조정 삭제 → 403"""
        record_id = fake_db.add(
            "adjustments", "2025",
            {"playerName": "이실버", "playerUid": "uid-silver", "applyTo": "total", "type": "penalty", "points": 3},
            "uid-admin",
        )
        response = client.delete(f"/api/club/adjustments/{record_id}", headers=SILVER)
        assert response.status_code == 403
        assert len(fake_db.records["adjustments"]) == 1

    def test_admin_deletes_adjustment(self, client, fake_db):
        record_id = fake_db.add(
            "adjustments", "2025", {"playerName": "이실버", "playerUid": "uid-silver", "points": 3}, "uid-admin"
        )
        assert client.delete(f"/api/club/adjustments/{record_id}", headers=ADMIN).status_code == 200

    def test_update_match_player_name(self, client, fake_db):
        record_id = fake_db.add("matches", "2025", {"playerName": "김골듣", "playerUid": "uid-gold"}, "uid-gold")
        body = {"player_name": "김골드", "competition_name": "c", "competition_type": "국제대회", "rank": "third"}
        assert client.put(f"/api/club/matches/{record_id}", json=body, headers=GOLD).status_code == 200
        assert fake_db.records["matches"][0]["playerName"] == "김골드"


class TestMyPage:
    """마이페이지"""

    def test_my_records(self, client, fake_db):
        fake_db.add("matches", "2025", {"playerName": "김골드", "playerUid": "uid-gold", "competitionName": "시장배"})

        response = client.get("/api/club/me/records", headers=GOLD)
        assert response.status_code == 200
        data = response.json()
        assert data["member"]["tierLevel"] == 30
        assert data["matches"][0]["competitionName"] == "시장배"
        assert data["activities"] == []

    def test_self_registration_shows_in_my_records(self, client):
        """player_uid 없이 등록한 기록도 마이페이지에 표시"""
        body = {key: value for key, value in MATCH_BODY.items() if key != "player_uid"}
        body["event_date"] = "2025-05-03"
        assert client.post("/api/club/matches", json=body, headers=GOLD).status_code == 201

        data = client.get("/api/club/me/records", headers=GOLD).json()
        assert len(data["matches"]) == 1
        assert data["matches"][0]["eventDate"] == "2025-05-03"

    def test_update_profile_requires_region(self, client):
        response = client.put("/api/club/me/profile", json={"phone": "010"}, headers=GOLD)
        assert response.status_code == 422

    def test_update_profile(self, client, fake_db):
        response = client.put("/api/club/me/profile", json={"region": "서울"}, headers=GOLD)
        assert response.status_code == 200
        assert fake_db.profiles["uid-gold"]["region"] == "서울"


class TestServerApp:
    """앱 레벨"""

    def test_health(self):
        from app.server import app
        client = TestClient(app)
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
