"""
Club Point - FastAPI 웹 서버

클럽 포인트 집계 / 리더보드 API
데이터 소스: Supabase
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from loguru import logger

from app.config import get_club_settings, get_supabase_config
from app.logging_config import setup_logging
from app.club import club_router, ClubPointService
from database.supabase_client import ClubPointDB, create_supabase_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """서버 시작 시 Supabase 연결, 종료 시 정리"""
    settings = get_club_settings()
    setup_logging(settings.log_level, settings.log_dir)

    try:
        client = create_supabase_client(get_supabase_config())
    except Exception as e:
        # 연결 없이도 기동 (포인트 API는 503)
        logger.error(f"Supabase 클라이언트 초기화 실패: {e}")
        app.state.point_service = None
    else:
        app.state.point_service = ClubPointService(ClubPointDB(client), settings)
        logger.info("Supabase 클라이언트 초기화 완료")

    yield

    logger.info("서버 종료됨")


# FastAPI 앱
app = FastAPI(
    title="Club Point",
    description="클럽 경기 결과/활동 포인트 리더보드",
    version="1.0.0",
    lifespan=lifespan
)

# Club Point 라우터 등록
app.include_router(club_router, prefix="/api")


@app.get("/health")
async def health_check():
    """헬스 체크"""
    return {
        "status": "ok",
        "database": getattr(app.state, "point_service", None) is not None,
        "timestamp": datetime.now().isoformat()
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=71)
