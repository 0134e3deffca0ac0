import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from talentgate.services.response_repair import clean_json_response, repair_response

_Q = '{"type":"mcq","skill":"Node","question":"What is npm?","options":["a","b"],"correctAnswer":0}'


class TestRepairResponse:
    def test_plain_object(self):
        r = repair_response('{"questions":[%s]}' % _Q)
        assert r.ok
        assert r.payload["questions"][0]["question"] == "What is npm?"

    def test_prose_around_object(self):
        r = repair_response('Sure! {"questions":[%s]} Hope that helps' % _Q)
        assert r.ok
        assert len(r.payload["questions"]) == 1

    def test_markdown_fences(self):
        r = repair_response('```json\n{"questions":[%s]}\n```' % _Q)
        assert r.ok

    def test_top_level_array_is_wrapped(self):
        r = repair_response("[%s, %s]" % (_Q, _Q))
        assert r.ok
        assert list(r.payload.keys()) == ["questions"]
        assert len(r.payload["questions"]) == 2

    def test_array_inside_prose(self):
        r = repair_response("Here you go: [%s, %s] enjoy" % (_Q, _Q))
        assert r.ok
        assert len(r.payload["questions"]) == 2

    def test_single_item_array_inside_prose(self):
        r = repair_response("Here you go: [%s] ok" % _Q)
        assert r.ok
        assert len(r.payload["questions"]) == 1

    def test_object_inside_prose_preferred_when_it_has_questions(self):
        r = repair_response('Result: {"questions": [%s], "tags": ["a"]} done' % _Q)
        assert r.ok
        assert len(r.payload["questions"]) == 1

    def test_prose_object_without_questions_reports_missing_array(self):
        r = repair_response('Result: {"items": 1} done')
        assert not r.ok
        assert "questions" in r.error

    def test_data_key_renamed(self):
        r = repair_response('{"data":[%s]}' % _Q)
        assert r.ok
        assert "data" not in r.payload
        assert len(r.payload["questions"]) == 1

    def test_empty_questions_fails(self):
        r = repair_response('{"questions": []}')
        assert not r.ok
        assert "empty" in r.error

    def test_missing_questions_fails(self):
        r = repair_response('{"items": [1, 2]}')
        assert not r.ok

    def test_questions_not_a_list_fails(self):
        r = repair_response('{"questions": "none"}')
        assert not r.ok

    def test_garbage_fails(self):
        r = repair_response("I could not generate questions today.")
        assert not r.ok
        assert r.payload is None

    def test_empty_input_fails(self):
        assert not repair_response("").ok
        assert not repair_response(None).ok

    def test_scalar_json_fails(self):
        assert not repair_response("42").ok


class TestCleanJsonResponse:
    def test_strips_json_fence(self):
        assert clean_json_response('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence_untouched(self):
        assert clean_json_response(' {"a": 1} ') == '{"a": 1}'
