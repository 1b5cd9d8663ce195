"""
Club Point Config - Supabase 및 포인트 집계 설정
"""
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class SupabaseConfig(BaseSettings):
    """Supabase 설정"""

    supabase_url: str = Field(default="", description="Supabase Project URL")
    supabase_key: str = Field(default="", description="Supabase anon/service key")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, extra="ignore")


class ClubPointSettings(BaseSettings):
    """클럽 포인트 설정"""

    # 활성 시즌이 없을 때 조회할 시즌 ID
    default_season_id: str = Field(default="2025", description="기본 시즌 ID")

    # 포인트 등록 가능 최소 등급 (30 = 골드)
    point_writer_tier_level: int = Field(default=30, description="포인트 등록 최소 등급")

    # 최근 활동 조회 개수 (마이페이지)
    recent_records_limit: int = Field(default=5, description="최근 레코드 조회 수")

    # 테스트 모드: 인증 없이 고정 회원으로 동작
    club_test_mode: bool = Field(default=False, description="테스트 모드")

    log_level: str = Field(default="INFO", description="로그 레벨")
    log_dir: str = Field(default="logs", description="로그 디렉토리")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, extra="ignore")


@lru_cache()
def get_supabase_config() -> SupabaseConfig:
    return SupabaseConfig()


@lru_cache()
def get_club_settings() -> ClubPointSettings:
    return ClubPointSettings()
