"""Tests for the matching and feedback engines."""

import random

import pytest

from jobwise.domain import ApplicationStatus
from jobwise.feedback import MISSING_KEYWORDS, RandomFeedbackEngine
from jobwise.matching import (
    KeywordMatchingEngine,
    RandomMatchingEngine,
    create_matching_engine,
)

SKILLS = ("Python", "SQL", "C++", "Docker", "React")


class TestRandomMatchingEngine:
    def test_score_and_keyword_bounds(self):
        for seed in range(200):
            result = RandomMatchingEngine(random.Random(seed)).match("ignored", SKILLS)
            assert 60 <= result.score <= 100
            assert set(result.keywords) <= set(SKILLS)

    def test_keeps_skill_order(self):
        result = RandomMatchingEngine(random.Random(3)).match("", SKILLS)
        assert list(result.keywords) == [s for s in SKILLS if s in result.keywords]

    def test_seeded_is_repeatable(self):
        a = RandomMatchingEngine(random.Random(42)).match("x", SKILLS)
        b = RandomMatchingEngine(random.Random(42)).match("x", SKILLS)
        assert a == b

    def test_no_skills(self):
        result = RandomMatchingEngine(random.Random(1)).match("x", ())
        assert result.keywords == ()


class TestKeywordMatchingEngine:
    def test_overlap(self):
        resume = "Senior engineer: python, sql and some c++ work."
        result = KeywordMatchingEngine().match(resume, SKILLS)
        assert result.keywords == ("Python", "SQL", "C++")
        assert result.score == 60 + round(40 * 3 / 5)

    def test_whole_terms_only(self):
        result = KeywordMatchingEngine().match("Reactive systems, MySQLite", ("React", "SQL"))
        assert result.keywords == ()
        assert result.score == 60

    def test_all_skills(self):
        result = KeywordMatchingEngine().match("Python SQL", ("Python", "SQL"))
        assert result.score == 100

    def test_no_skills(self):
        assert KeywordMatchingEngine().match("anything", ()).score == 60


class TestCreateMatchingEngine:
    def test_by_name(self):
        assert isinstance(create_matching_engine("random"), RandomMatchingEngine)
        assert isinstance(create_matching_engine(" Keyword "), KeywordMatchingEngine)

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_matching_engine("llm")


class TestRandomFeedbackEngine:
    def test_category_ranges(self):
        for seed in range(100):
            fb = RandomFeedbackEngine(random.Random(seed)).feedback("resume")
            assert 70 <= fb.grammar.score < 100
            assert 70 <= fb.ats.score < 100
            assert 80 <= fb.structure.score < 100
            assert 60 <= fb.keywords.score < 100
            assert 60 <= fb.branding.score < 100
            assert 70 <= fb.overall < 100

    def test_fixed_texts(self):
        fb = RandomFeedbackEngine(random.Random(0)).feedback("")
        assert fb.keywords.missing == MISSING_KEYWORDS
        assert len(fb.grammar.suggestions) == 2


class TestStatusGraph:
    def test_forward_only(self):
        applied = ApplicationStatus.APPLIED
        assert applied.can_move_to(ApplicationStatus.IN_REVIEW)
        assert applied.can_move_to(ApplicationStatus.HIRED)
        assert applied.can_move_to(ApplicationStatus.REJECTED)
        assert not applied.can_move_to(ApplicationStatus.APPLIED)
        assert not ApplicationStatus.INTERVIEW.can_move_to(ApplicationStatus.IN_REVIEW)

    def test_terminal(self):
        for terminal in (ApplicationStatus.HIRED, ApplicationStatus.REJECTED):
            assert terminal.is_terminal
            assert not any(terminal.can_move_to(s) for s in ApplicationStatus)
