# tests/test_response_parser.py
import json

import pytest

from explorer.models.explore import ExploreResponse, RelatedQuestion, RelatedTopic
from explorer.models.question import UserContext
from explorer.services.errors import GenerationFailure, MalformedResponse
from explorer.services.response_parser import (
    StreamAccumulator,
    extract_json_span,
    letter_to_index,
    parse_explore_response,
    parse_playground_questions,
)
from conftest import EXPLORE_JSON, PLAYGROUND_JSON

pytestmark = pytest.mark.core


class TestExploreParsing:
    def test_normalizes_field_names_and_joins_paragraphs(self):
        result = parse_explore_response(json.dumps(EXPLORE_JSON))
        assert result == ExploreResponse(
            content="a\n\nb\n\nc",
            related_topics=[RelatedTopic(topic="X", type="extension")],
            related_questions=[RelatedQuestion(question="Q?", type="insight", context="c")],
        )

    def test_accepts_markdown_fenced_json(self):
        text = "```json\n" + json.dumps(EXPLORE_JSON) + "\n```"
        assert parse_explore_response(text).content == "a\n\nb\n\nc"

    def test_invalid_json_is_malformed(self):
        with pytest.raises(MalformedResponse):
            parse_explore_response("Sorry, I can't help with that.")

    def test_missing_fields_are_malformed(self):
        with pytest.raises(MalformedResponse):
            parse_explore_response(json.dumps({"content": {"paragraph1": "a"}}))

    def test_unknown_topic_type_is_malformed(self):
        bad = dict(EXPLORE_JSON, relatedTopics=[{"name": "X", "type": "sideways", "reason": ""}])
        with pytest.raises(MalformedResponse):
            parse_explore_response(json.dumps(bad))

    def test_malformed_is_a_generation_failure(self):
        assert issubclass(MalformedResponse, GenerationFailure)


class TestStreamAccumulator:
    def test_partial_json_is_ignored_until_complete(self):
        acc = StreamAccumulator()
        first = acc.feed('{"topics":[{"na')
        assert acc.parse_count == 0
        assert first.topics == []

        second = acc.feed('me":"Y","type":"deeper","reason":"r"}]}')
        assert acc.parse_count == 1
        assert [(t.topic, t.type.value, t.reason) for t in second.topics] == [("Y", "deeper", "r")]
        assert second.questions == []

    def test_text_is_cut_at_delimiter(self):
        acc = StreamAccumulator()
        update = acc.feed("  Memes explain it.  \n---\n{")
        assert update.text == "Memes explain it."
        update = acc.feed('"questions":[{"text":"Why?","type":"causality","context":"ctx"}]}')
        assert update.text == "Memes explain it."
        assert update.questions == [RelatedQuestion(question="Why?", type="causality", context="ctx")]

    def test_failed_parse_keeps_previous_metadata(self):
        acc = StreamAccumulator()
        acc.feed('intro --- {"topics":[{"name":"A","type":"parallel","reason":""}]}')
        update = acc.feed(' trailing } junk')
        assert acc.parse_count == 1
        assert [t.topic for t in update.topics] == ["A"]

    def test_entry_with_unknown_type_is_skipped_alone(self):
        acc = StreamAccumulator()
        update = acc.feed(
            'text --- {"topics":[{"name":"A","type":"related","reason":""},'
            '{"name":"B","type":"parallel","reason":"r"}],'
            '"questions":[{"text":"How?","type":"mechanism","context":"c"},{"text":"Bad"}]}'
        )
        assert acc.parse_count == 1
        assert [t.topic for t in update.topics] == ["B"]
        assert [q.question for q in update.questions] == ["How?"]

    def test_text_without_json_never_parses(self):
        acc = StreamAccumulator()
        for piece in ["Just ", "plain ", "text"]:
            update = acc.feed(piece)
        assert update.text == "Just plain text"
        assert acc.parse_count == 0


class TestPlaygroundParsing:
    CONTEXT = UserContext(age=15)

    def test_extracts_json_from_prose(self):
        text = "Sure! " + json.dumps(PLAYGROUND_JSON) + " Good luck."
        questions = parse_playground_questions(text, "Biology", 3, self.CONTEXT)

        assert len(questions) == 2
        first = questions[0]
        assert first.options == ["ATP", "DNA", "Lipids", "Starch"]
        assert first.correct_answer == 0
        assert first.difficulty == 3
        assert first.topic == "Biology"
        assert first.subtopic == "Organelles"
        assert first.question_type == "conceptual"
        assert first.age_group == "15"
        assert first.explanation.key_point == "Energy currency"

    def test_missing_subtopic_defaults_to_topic(self):
        questions = parse_playground_questions(json.dumps(PLAYGROUND_JSON), "Biology", 1, self.CONTEXT)
        assert questions[1].subtopic == "Biology"
        assert questions[1].correct_answer == 2

    def test_options_keep_insertion_order(self):
        payload = {"questions": [dict(PLAYGROUND_JSON["questions"][0],
                                      options={"A": "first", "B": "second", "C": "third", "D": "fourth"})]}
        questions = parse_playground_questions(json.dumps(payload), "t", 1, self.CONTEXT)
        assert questions[0].options == ["first", "second", "third", "fourth"]

    def test_no_json_span(self):
        with pytest.raises(MalformedResponse, match="No valid JSON found"):
            parse_playground_questions("no braces here", "t", 1, self.CONTEXT)

    def test_unparseable_span(self):
        with pytest.raises(MalformedResponse, match="Invalid JSON"):
            parse_playground_questions("{not: json}", "t", 1, self.CONTEXT)

    def test_greedy_span_swallows_unrelated_braces(self):
        text = json.dumps(PLAYGROUND_JSON) + " see {footnote}"
        assert extract_json_span(text).endswith("{footnote}")
        with pytest.raises(MalformedResponse):
            parse_playground_questions(text, "t", 1, self.CONTEXT)


@pytest.mark.parametrize(
    "letter, index",
    [("A", 0), ("B", 1), ("C", 2), ("D", 3), ("E", 3), ("a", 3), ("", 3), ("Z", 3)],
)
def test_letter_to_index_falls_through_to_three(letter, index):
    assert letter_to_index(letter) == index
