"""
Calculator Tests - 경기/활동 포인트 계산 테스트
"""
import pytest

from ranking.calculator import (
    calculate_activity_points,
    calculate_match_points,
    compute_activity_points,
    compute_match_points,
)
from ranking.models import PointRules


class TestMatchPoints:
    """경기 결과 포인트"""

    @pytest.mark.parametrize("comp_type,rank,expected", [
        ("국제대회", "winner", 10),
        ("국제대회", "runner-up", 7),
        ("국제대회", "third", 5),
        ("국제대회", "participation", 2),
        ("국내대회", "winner", 3),
        ("국내대회", "runner-up", 2),
        ("국내대회", "third", 1),
        ("국내대회", "participation", 0.5),
    ])
    def test_table_value(self, sample_point_rules, comp_type, rank, expected):
        """2부리그/타클럽이 아니면 규정표 값 그대로"""
        assert calculate_match_points(sample_point_rules, comp_type, rank, "open", "아니오") == expected

    def test_synonyms_resolve(self, sample_point_rules):
        assert calculate_match_points(sample_point_rules, "국제", "우승") == 10
        assert calculate_match_points(sample_point_rules, "domestic", "2위", "오픈부") == 2

    def test_division2(self, sample_point_rules):
        """국내 2부리그 = 오픈부 × 0.3"""
        assert calculate_match_points(sample_point_rules, "국내대회", "winner", "2부리그") == 0.9

    def test_division2_ignored_for_international(self, sample_point_rules):
        assert calculate_match_points(sample_point_rules, "국제대회", "winner", "2부리그") == 10

    def test_other_club_default_factor(self, sample_point_rules):
        """패널티 미설정 → × 0.3"""
        assert calculate_match_points(sample_point_rules, "국제대회", "winner", "", "예") == 3.0

    def test_other_club_multiplicative_penalty(self, sample_point_rules):
        rules = {**sample_point_rules, "otherClubMemberPenalty": 0.5}
        assert calculate_match_points(rules, "국제대회", "winner", "", "yes") == 5.0

    def test_other_club_additive_penalty(self, sample_point_rules):
        rules = {**sample_point_rules, "otherClubMemberPenalty": 2}
        assert calculate_match_points(rules, "국제대회", "winner", "", "yes") == 8.0

    def test_additive_penalty_can_go_negative(self, sample_point_rules):
        """차감 패널티가 기본 점수보다 크면 음수 (0으로 자르지 않음)"""
        rules = {**sample_point_rules, "otherClubMemberPenalty": 5}
        assert calculate_match_points(rules, "국내대회", "third", "open", "yes") == -4.0

    def test_penalty_stored_inside_match_table(self, sample_point_rules):
        """match 안에 저장된 otherClubMemberPenalty도 인식"""
        rules = {
            "match": {**sample_point_rules["match"], "otherClubMemberPenalty": 0.5},
            "activity": sample_point_rules["activity"],
        }
        assert calculate_match_points(rules, "국제대회", "runner-up", "", "예") == 3.5

    def test_division2_and_other_club_both_apply(self, sample_point_rules):
        """2부리그 × 0.3 후 타클럽 × 0.3 순서대로 적용"""
        assert calculate_match_points(sample_point_rules, "국내대회", "winner", "2부", "예") == 0.27

    def test_rounding_two_decimals(self):
        rules = {"match": {"국내대회": {"winner": 1 / 3}}}
        points = calculate_match_points(rules, "국내대회", "winner", "open")
        assert points == 0.33

        points = calculate_match_points(rules, "국내대회", "winner", "2부")
        assert points == 0.1

    def test_rounding_half_up(self):
        """0.125 → 0.13 (은행가 반올림 아님)"""
        rules = {"match": {"국제대회": {"winner": 0.25}, "otherClubMemberPenalty": 0.5}}
        assert calculate_match_points(rules, "국제대회", "winner", "", "예") == 0.13

    def test_penalty_of_one_is_subtracted(self, sample_point_rules):
        """패널티 1은 곱하지 않고 뺀다"""
        rules = {**sample_point_rules, "otherClubMemberPenalty": 1}
        assert calculate_match_points(rules, "국제대회", "winner", "", "예") == 9.0

    def test_penalty_of_zero_keeps_base(self, sample_point_rules):
        """패널티 0은 규정값 그대로"""
        rules = {**sample_point_rules, "otherClubMemberPenalty": 0}
        assert calculate_match_points(rules, "국제대회", "winner", "", "예") == 10.0

    def test_negative_penalty_adds(self, sample_point_rules):
        rules = {**sample_point_rules, "otherClubMemberPenalty": -2}
        assert calculate_match_points(rules, "국제대회", "winner", "", "예") == 12.0

    def test_unknown_categories_are_zero(self, sample_point_rules):
        assert calculate_match_points(sample_point_rules, "지역대회", "winner") == 0
        assert calculate_match_points(sample_point_rules, "국제대회", "8강") == 0

    def test_empty_rules(self):
        assert calculate_match_points(None, "국제대회", "winner") == 0
        assert calculate_match_points(PointRules(), "국제대회", "winner") == 0


class TestActivityPoints:
    """활동 포인트"""

    def test_direct_lookup(self, sample_point_rules):
        assert calculate_activity_points(sample_point_rules, "정기모임") == 1
        assert calculate_activity_points(sample_point_rules, "지각") == -1

    def test_alias_equivalence(self, sample_point_rules):
        """별칭과 정식 항목은 같은 점수"""
        alias = compute_activity_points({"activityType": "클럽내부대회"}, sample_point_rules)
        canonical = compute_activity_points({"activityType": "내부리그 운영"}, sample_point_rules)
        assert alias == canonical == 2

    def test_unknown_is_zero(self, sample_point_rules):
        assert calculate_activity_points(sample_point_rules, "없는 항목") == 0


class TestStoredPoints:
    """저장된 포인트 우선"""

    def test_match_prefers_stored_points(self, sample_point_rules):
        record = {"type": "국제대회", "rank": "winner", "points": 4.5}
        assert compute_match_points(record, sample_point_rules) == 4.5

    def test_match_stored_zero_is_kept(self, sample_point_rules):
        record = {"type": "국제대회", "rank": "winner", "points": 0}
        assert compute_match_points(record, sample_point_rules) == 0

    def test_match_recomputes_without_points(self, sample_point_rules):
        record = {"type": "국제대회", "rank": "winner"}
        assert compute_match_points(record, sample_point_rules) == 10

    def test_non_numeric_stored_points_recompute(self, sample_point_rules):
        """문자열 포인트는 저장값으로 인정하지 않음"""
        record = {"type": "국내대회", "rank": "winner", "leagueType": "open", "points": "7"}
        assert compute_match_points(record, sample_point_rules) == 3

    def test_activity_prefers_stored_points(self, sample_point_rules):
        record = {"activityType": "정기모임", "points": 3}
        assert compute_activity_points(record, sample_point_rules) == 3
