"""
Tests for ResponseSet upsert semantics.
"""
from datetime import timedelta

import pytest

from reflector.core.errors import ResponseOwnershipError
from reflector.core.psychometrics.scoring import ResponseSet
from reflector.schemas.responses import UserResponse
from tests.conftest import BASE_TIME


def response(item_id, value, assessment_id="a1", user_id="user-1", offset=0):
    return UserResponse(
        user_id=user_id,
        assessment_id=assessment_id,
        item_id=item_id,
        value=value,
        timestamp=BASE_TIME + timedelta(minutes=offset),
    )


class TestResponseSet:
    """Tests for keyed storage of a user's responses."""

    def test_later_answer_supersedes_earlier(self):
        responses = ResponseSet("user-1", [response("eai_01", 2), response("eai_01", 6)])

        assert len(responses) == 1
        assert responses.get("a1", "eai_01").value == 6

    def test_same_item_in_different_assessments_is_kept(self):
        responses = ResponseSet(
            "user-1",
            [response("eai_01", 2, "a1"), response("eai_01", 6, "a2")],
        )

        assert len(responses) == 2
        assert ("a1", "eai_01") in responses
        assert ("a2", "eai_01") in responses

    def test_rejects_other_users_responses(self):
        responses = ResponseSet("user-1")
        with pytest.raises(ResponseOwnershipError):
            responses.add(response("eai_01", 4, user_id="user-2"))

    def test_for_assessment(self):
        responses = ResponseSet(
            "user-1",
            [response("eai_01", 2, "a1"), response("eai_03", 5, "a2")],
        )
        assert [r.item_id for r in responses.for_assessment("a2")] == ["eai_03"]

    def test_assessment_ids_in_first_appearance_order(self):
        responses = ResponseSet(
            "user-1",
            [
                response("eai_01", 2, "b"),
                response("eai_01", 2, "a"),
                response("eai_03", 2, "b"),
            ],
        )
        assert responses.assessment_ids() == ["b", "a"]

    def test_latest_assessment_id(self):
        responses = ResponseSet(
            "user-1",
            [
                response("eai_01", 2, "new", offset=10),
                response("eai_01", 2, "old", offset=0),
            ],
        )
        assert responses.latest_assessment_id() == "new"

    def test_latest_assessment_id_empty(self):
        assert ResponseSet("user-1").latest_assessment_id() is None

    def test_from_responses_takes_owner_from_first(self):
        responses = ResponseSet.from_responses([response("eai_01", 3)])
        assert responses.user_id == "user-1"
