"""Tests for fuzzy canned-answer lookup."""

from __future__ import annotations

import pytest

from portfolio_assistant.chat.canned import CannedAnswerIndex
from portfolio_assistant.chat.content import ANSWERS, PREDEFINED_RESPONSES


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def index() -> CannedAnswerIndex:
    return CannedAnswerIndex()


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class TestLookup:
    def test_exact_phrasing_hits(self, index: CannedAnswerIndex) -> None:
        assert index.lookup("tell me about emmanuella") == ANSWERS["aboutMe"]

    def test_case_and_punctuation_ignored(self, index: CannedAnswerIndex) -> None:
        assert index.lookup("Tell me about Emmanuella!") == ANSWERS["aboutMe"]

    def test_near_phrasing_hits(self, index: CannedAnswerIndex) -> None:
        assert index.lookup("tech stack please") == ANSWERS["techStack"]

    @pytest.mark.parametrize(
        "query",
        ["What's your tech stack?", "whats your tech stack", "What technologies does she use?"],
    )
    def test_tech_stack_variants_hit(self, index: CannedAnswerIndex, query: str) -> None:
        assert index.lookup(query) == ANSWERS["techStack"]

    @pytest.mark.parametrize(
        "query",
        [
            "zzzz qqqq",
            "asdkjasdkj random gibberish",
            "what is graphql",
            "what are react hooks",
            "how do i center a div",
            "hire her",
            "this",
            "think",
        ],
    )
    def test_off_topic_questions_miss(self, index: CannedAnswerIndex, query: str) -> None:
        assert index.lookup(query) is None

    def test_shared_word_is_not_enough(self, index: CannedAnswerIndex) -> None:
        found = index.match("what is graphql")
        assert found is not None
        assert found.score >= index.threshold

    def test_exact_match_scores_zero(self, index: CannedAnswerIndex) -> None:
        found = index.match("hello")
        assert found is not None
        assert found.phrasing == "hello"
        assert found.score == pytest.approx(0.0)

    def test_every_phrasing_resolves_to_its_answer(self, index: CannedAnswerIndex) -> None:
        for phrasing, answer in PREDEFINED_RESPONSES.items():
            assert index.lookup(phrasing) == answer

    def test_blank_query_has_no_match(self, index: CannedAnswerIndex) -> None:
        assert index.match("   ") is None
        assert index.match("?!") is None


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_default_content_loaded(self, index: CannedAnswerIndex) -> None:
        assert len(index) == len(PREDEFINED_RESPONSES)

    def test_empty_index_never_matches(self) -> None:
        index = CannedAnswerIndex(responses={})
        assert index.lookup("hello") is None

    def test_custom_responses(self) -> None:
        index = CannedAnswerIndex(responses={"opening hours": "Nine to five."})
        assert index.lookup("Opening hours?") == "Nine to five."

    @pytest.mark.parametrize("threshold", [0.0, -0.1, 1.5])
    def test_invalid_threshold_rejected(self, threshold: float) -> None:
        with pytest.raises(ValueError):
            CannedAnswerIndex(threshold=threshold)

