"""
Tests for Cronbach's alpha on construct subscales.
"""
import pytest

from reflector.core.psychometrics.reliability import (
    build_item_matrix,
    calculate_construct_alpha,
    cronbachs_alpha,
    get_alpha_interpretation,
)


class TestCronbachsAlpha:
    """Tests for the alpha formula and its unmeasured cases."""

    def test_known_matrix(self):
        """
        Item variances 2, 0.5, 4.5 (sum 7); total variance 18.
        alpha = 3/2 * (1 - 7/18) = 0.9167
        """
        matrix = [[5, 5, 6], [3, 4, 3]]
        assert cronbachs_alpha(matrix) == pytest.approx(0.9167)

    def test_single_administration_is_unmeasured(self):
        assert cronbachs_alpha([[5, 5, 6]]) is None

    def test_fewer_than_three_items_is_unmeasured(self):
        assert cronbachs_alpha([[5, 5], [3, 4]]) is None

    def test_ragged_rows_are_unmeasured(self):
        assert cronbachs_alpha([[5, 5, 6], [3, 4]]) is None

    def test_zero_total_variance_is_unmeasured(self):
        """Identical administrations have no variance to decompose."""
        assert cronbachs_alpha([[4, 4, 4], [4, 4, 4]]) is None

    def test_alpha_is_clamped(self):
        """Items moving against each other give a negative alpha, floored at -1."""
        matrix = [[7, 1, 7], [1, 7, 2], [7, 1, 6]]
        alpha = cronbachs_alpha(matrix)
        assert alpha is not None
        assert -1.0 <= alpha < 0


class TestBuildItemMatrix:
    def test_uses_items_common_to_all_administrations(self):
        administrations = {
            "a": {"i1": 5, "i2": 4, "i3": 6},
            "b": {"i1": 3, "i3": 2},
        }
        matrix = build_item_matrix(administrations, ["i1", "i2", "i3"])
        assert matrix == [[5, 6], [3, 2]]

    def test_administrations_without_candidate_items_are_ignored(self):
        administrations = {"a": {"i1": 5}, "b": {"other": 3}}
        assert build_item_matrix(administrations, ["i1"]) == [[5]]

    def test_nothing_in_common(self):
        assert build_item_matrix({}, ["i1"]) == []


class TestCalculateConstructAlpha:
    def test_two_administrations(self):
        administrations = {
            "a": {"i1": 5, "i2": 5, "i3": 6},
            "b": {"i1": 3, "i2": 4, "i3": 3},
        }
        alpha = calculate_construct_alpha(administrations, ["i1", "i2", "i3"])
        assert alpha == pytest.approx(0.9167)

    def test_too_few_items_in_scored_instance(self):
        administrations = {"a": {"i1": 5, "i2": 5}, "b": {"i1": 3, "i2": 4}}
        assert calculate_construct_alpha(administrations, ["i1", "i2"]) is None


class TestAlphaInterpretation:
    @pytest.mark.parametrize(
        "alpha,expected",
        [
            (0.95, "excellent"),
            (0.85, "good"),
            (0.70, "acceptable"),
            (0.65, "questionable"),
            (0.55, "poor"),
            (0.2, "unacceptable"),
        ],
    )
    def test_thresholds(self, alpha, expected):
        assert get_alpha_interpretation(alpha) == expected
