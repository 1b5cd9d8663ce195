"""
클럽 포인트 예외

- ClubPointError: 모든 포인트 관련 오류의 기본 클래스
- SeasonNotFoundError: 활성/기본 시즌 없음 (집계 불가)
- RecordNotFoundError: 수정/삭제 대상 레코드 없음
- PermissionDeniedError: 레코드 수정 권한 없음
"""


class ClubPointError(Exception):
    """클럽 포인트 기본 예외"""
    pass


class SeasonNotFoundError(ClubPointError):
    """활성 시즌과 기본 시즌이 모두 없음"""

    def __init__(self, message: str = "활성 시즌 정보를 찾을 수 없습니다."):
        super().__init__(message)


class RecordNotFoundError(ClubPointError):
    """레코드를 찾을 수 없음"""
    pass


class PermissionDeniedError(ClubPointError):
    """레코드 수정/삭제 권한 없음"""

    def __init__(self, message: str = "본인 또는 관리자만 수정할 수 있습니다."):
        super().__init__(message)
