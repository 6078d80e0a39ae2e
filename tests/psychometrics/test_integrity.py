"""
Tests for response integrity checks.
"""
from datetime import timedelta

import pytest

from reflector.core.psychometrics.integrity import (
    assess_response_integrity,
    calculate_acquiescence_bias,
    check_attention,
    check_completion_time,
    detect_straightlining,
    longest_identical_run,
)
from reflector.schemas.scores import ResponseIntegrity
from tests.conftest import BASE_TIME, full_bank_answers, make_responses, varied_bank_answers


class TestAcquiescenceBias:
    """Tests for the extreme-agree fraction."""

    def test_empty_is_zero(self):
        assert calculate_acquiescence_bias([]) == 0.0

    def test_all_extreme_agree(self):
        assert calculate_acquiescence_bias([6, 7, 7, 6]) == 1.0

    def test_fraction_rounded(self):
        assert calculate_acquiescence_bias([7, 1, 2]) == pytest.approx(0.33)

    def test_ignores_item_keying(self):
        """Reverse-keyed items count by raw value: 7 is 'agree' either way."""
        responses = make_responses({"eai_01": 7, "eai_02": 7, "eai_03": 1, "eai_04": 1})
        result = assess_response_integrity(responses)
        assert result.acquiescence_bias == pytest.approx(0.5)


class TestStraightlining:
    """Tests for identical-answer runs."""

    def test_longest_run(self):
        assert longest_identical_run([]) == 0
        assert longest_identical_run([3]) == 1
        assert longest_identical_run([1, 1, 2, 2, 2, 1]) == 3

    def test_run_at_threshold_is_flagged(self):
        assert detect_straightlining([4] * 10, run_length=10) is True

    def test_run_below_threshold_is_not_flagged(self):
        assert detect_straightlining([4] * 9 + [5], run_length=10) is False

    def test_full_bank_same_answer_is_flagged(self):
        responses = make_responses(full_bank_answers(likert_value=5))
        assert assess_response_integrity(responses).straightlining is True

    def test_varied_answers_are_not_flagged(self):
        responses = make_responses(varied_bank_answers())
        assert assess_response_integrity(responses).straightlining is False

    def test_answer_order_follows_timestamps(self):
        """Runs are measured in answering order, not submission order."""
        answers = {f"eai_0{i}": 4 if i % 2 else 3 for i in range(1, 10)}
        responses = make_responses(answers)
        reordered = sorted(responses, key=lambda r: r.value)
        result = assess_response_integrity(reordered, straightlining_run_length=5)
        assert result.straightlining is False


class TestCompletionTime:
    """Tests for the completion-time plausibility floor."""

    def test_too_fast_from_timestamps(self):
        responses = make_responses(full_bank_answers(), seconds_per_item=1.0)
        assert check_completion_time(responses, None, min_seconds_per_item=2.0) is True

    def test_plausible_from_timestamps(self):
        responses = make_responses(full_bank_answers(), seconds_per_item=10.0)
        assert check_completion_time(responses, None, min_seconds_per_item=2.0) is False

    def test_elapsed_seconds_overrides_timestamps(self):
        responses = make_responses(full_bank_answers(), seconds_per_item=10.0)
        assert check_completion_time(responses, 30.0, min_seconds_per_item=2.0) is True

    def test_single_response_never_flagged(self):
        responses = make_responses({"eai_01": 4})
        assert check_completion_time(responses, 0.0) is False


class TestAttentionChecks:
    """Tests for instructed-response items."""

    def test_correct_answers_pass(self):
        responses = make_responses({"attn_01": 7, "attn_02": 1, "eai_01": 4})
        assert check_attention(responses) is True

    def test_wrong_answer_fails(self):
        responses = make_responses({"attn_01": 5, "eai_01": 4})
        assert check_attention(responses) is False

    def test_no_attention_items_pass(self):
        assert check_attention(make_responses({"eai_01": 4})) is True


class TestAssessResponseIntegrity:
    def test_empty_input_is_neutral(self):
        assert assess_response_integrity([]) == ResponseIntegrity()

    def test_never_raises_on_out_of_range_values(self):
        """Integrity checks tolerate values the scorer would reject."""
        responses = make_responses({"eai_01": 12, "eai_03": -3})
        result = assess_response_integrity(responses)
        assert isinstance(result, ResponseIntegrity)

    def test_combined_verdict(self):
        answers = {"attn_01": 3}
        answers.update(full_bank_answers(likert_value=7))
        responses = make_responses(answers, start=BASE_TIME - timedelta(seconds=5))
        result = assess_response_integrity(responses, elapsed_seconds=20.0)

        assert result.acquiescence_bias == 1.0
        assert result.straightlining is True
        assert result.completion_time_flag is True
        assert result.attention_check_passed is False
