"""
Tests for per-question validation and correction.

Rejections discard a single candidate; fixable defects are corrected.
"""
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from talentgate.services.hashing import hash_question
from talentgate.services.question_validator import (
    STARTER_CODE_PLACEHOLDER,
    validate_question,
)


def _mcq(**kw):
    q = {
        "type": "mcq",
        "skill": "SQL",
        "question": "Which clause filters grouped rows?",
        "options": ["WHERE", "HAVING", "ORDER BY", "LIMIT"],
        "correctAnswer": 1,
    }
    q.update(kw)
    return q


# ---------------------------------------------------------------------------
# Rejections
# ---------------------------------------------------------------------------

class TestRejections:
    def test_missing_question_text(self):
        out = validate_question({"type": "mcq", "options": ["a", "b"]}, set())
        assert not out.accepted
        assert "missing" in out.reason

    def test_non_string_question(self):
        assert not validate_question(_mcq(question=42), set()).accepted

    def test_blank_question(self):
        assert not validate_question(_mcq(question="   "), set()).accepted

    def test_not_a_dict(self):
        assert not validate_question("What is SQL?", set()).accepted

    def test_duplicate_of_seen_hash(self):
        seen = {hash_question("Which clause filters grouped rows?")}
        out = validate_question(_mcq(), seen)
        assert not out.accepted
        assert out.reason == "duplicate question"

    def test_mcq_without_options(self):
        q = _mcq()
        del q["options"]
        assert not validate_question(q, set()).accepted

    def test_mcq_with_one_option(self):
        assert not validate_question(_mcq(options=["only"]), set()).accepted

    def test_mcq_options_not_a_list(self):
        assert not validate_question(_mcq(options="A, B, C"), set()).accepted

    def test_unknown_type(self):
        out = validate_question(_mcq(type="essay"), set())
        assert not out.accepted
        assert "essay" in out.reason


# ---------------------------------------------------------------------------
# Corrections
# ---------------------------------------------------------------------------

class TestMcqCorrections:
    def test_valid_answer_kept(self):
        out = validate_question(_mcq(), set())
        assert out.accepted
        assert out.question.correct_answer == 1

    def test_out_of_range_answer_corrected_to_zero(self):
        out = validate_question(_mcq(correctAnswer=9), set())
        assert out.accepted
        assert out.question.correct_answer == 0
        assert len(out.question.options) == 4

    def test_negative_answer_corrected(self):
        assert validate_question(_mcq(correctAnswer=-1), set()).question.correct_answer == 0

    def test_missing_answer_defaults_to_zero(self):
        q = _mcq()
        del q["correctAnswer"]
        assert validate_question(q, set()).question.correct_answer == 0

    def test_numeric_string_answer(self):
        assert validate_question(_mcq(correctAnswer="2"), set()).question.correct_answer == 2

    def test_letter_answer_falls_back_to_zero(self):
        assert validate_question(_mcq(correctAnswer="B"), set()).question.correct_answer == 0

    def test_superscript_digit_answer_falls_back_to_zero(self):
        out = validate_question(_mcq(correctAnswer="²"), set())
        assert out.accepted
        assert out.question.correct_answer == 0

    def test_malformed_numeric_string_falls_back_to_zero(self):
        assert validate_question(_mcq(correctAnswer="--1"), set()).question.correct_answer == 0

    def test_padded_numeric_string(self):
        assert validate_question(_mcq(correctAnswer=" 3 "), set()).question.correct_answer == 3

    def test_bool_answer_is_not_an_index(self):
        assert validate_question(_mcq(correctAnswer=True), set()).question.correct_answer == 0

    def test_option_objects_flattened(self):
        out = validate_question(_mcq(options=[{"text": "WHERE"}, {"option": "HAVING"}]), set())
        assert out.accepted
        assert out.question.options == ["WHERE", "HAVING"]


class TestCodingCorrections:
    def test_missing_starter_code_filled(self):
        q = {"type": "coding", "skill": "Node", "question": "Reverse a linked list."}
        out = validate_question(q, set())
        assert out.accepted
        assert out.question.starter_code == STARTER_CODE_PLACEHOLDER

    def test_blank_starter_code_filled(self):
        q = {"type": "coding", "question": "Reverse a string.", "starterCode": "  "}
        assert validate_question(q, set()).question.starter_code == STARTER_CODE_PLACEHOLDER

    def test_starter_code_kept(self):
        q = {"type": "coding", "question": "Sum an array.", "starterCode": "def total(xs):"}
        assert validate_question(q, set()).question.starter_code == "def total(xs):"


class TestNormalization:
    def test_type_lowercased(self):
        out = validate_question(_mcq(type=" MCQ "), set())
        assert out.question.type == "mcq"

    def test_type_defaults_to_mcq(self):
        q = _mcq()
        del q["type"]
        assert validate_question(q, set()).question.type == "mcq"

    def test_skill_defaults_to_general(self):
        q = _mcq()
        del q["skill"]
        assert validate_question(q, set()).question.skill == "General"

    def test_outcome_carries_hash(self):
        out = validate_question(_mcq(), set())
        assert out.hash == hash_question("Which clause filters grouped rows?")

    def test_does_not_mutate_seen(self):
        seen: set[str] = set()
        validate_question(_mcq(), seen)
        assert seen == set()
