"""
클럽 포인트 리더보드 CLI
"""
import asyncio
import json
import sys
from typing import Any, Dict
from loguru import logger

from app.config import ClubPointSettings, get_club_settings, get_supabase_config
from app.logging_config import setup_logging
from database.supabase_client import ClubPointDB, create_supabase_client
from ranking.calculator import ClubRankCalculator
from ranking.exceptions import ClubPointError


async def fetch_season_data(settings: ClubPointSettings) -> Dict[str, Any]:
    """Supabase에서 시즌 + 레코드 전체 조회 (JSON 덤프 형식)"""
    db = ClubPointDB(create_supabase_client(get_supabase_config()))

    season = await db.fetch_season(settings.default_season_id)
    if season is None:
        return {"season": None, "matches": [], "activities": [], "adjustments": []}

    matches, activities, adjustments = await asyncio.gather(
        db.list_matches(season.id),
        db.list_activities(season.id),
        db.list_adjustments(season.id),
    )

    return {
        "season": season.to_dict(),
        "matches": [m.to_dict() for m in matches],
        "activities": [a.to_dict() for a in activities],
        "adjustments": [a.to_dict() for a in adjustments],
    }


async def main():
    """메인 함수"""
    import argparse

    parser = argparse.ArgumentParser(description="클럽 포인트 리더보드")
    parser.add_argument(
        "--mode",
        choices=["leaderboard", "dump"],
        default="leaderboard",
        help="실행 모드 (dump: Supabase 데이터를 JSON으로 저장)"
    )
    parser.add_argument(
        "--data",
        help="JSON 덤프 파일 (없으면 Supabase에서 조회)"
    )
    parser.add_argument(
        "--output",
        help="결과 JSON 파일"
    )
    parser.add_argument(
        "--top",
        type=int,
        default=20,
        help="출력할 상위 순위 수"
    )

    args = parser.parse_args()

    settings = get_club_settings()
    setup_logging(settings.log_level, settings.log_dir)

    if args.data:
        with open(args.data, "r", encoding="utf-8") as f:
            data = json.load(f)
    else:
        data = await fetch_season_data(settings)

    if args.mode == "dump":
        if not args.output:
            parser.error("--mode dump에는 --output이 필요합니다")
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        logger.info(f"시즌 데이터 저장 완료: {args.output}")
        return

    calculator = ClubRankCalculator()
    calculator.load_from_data(data)

    try:
        rows = calculator.calculate_leaderboard()
    except ClubPointError as e:
        logger.error(f"리더보드 계산 실패: {e}")
        sys.exit(1)

    calculator.print_leaderboard_summary(
        rows,
        title=f"{calculator.season.display_title} 클럽 포인트 리더보드",
        top_n=args.top
    )

    if args.output:
        calculator.export_leaderboard(args.output)


if __name__ == "__main__":
    asyncio.run(main())
