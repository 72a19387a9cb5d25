# Turns raw model text into the application's stable data shapes
# explorer/services/response_parser.py
import json
import re
from typing import Any, List

from pydantic import ValidationError

from explorer.models.explore import ExploreResponse, RelatedQuestion, RelatedTopic, StreamChunk, StreamTopic
from explorer.models.provider import (
    ExplorePayload,
    PlaygroundPayload,
    ProviderPlaygroundQuestion,
    ProviderQuestion,
    ProviderTopic,
)
from explorer.models.question import Explanation, Question, UserContext
from explorer.services.errors import MalformedResponse
from explorer.utils.logger import logger

_FENCE_RE = re.compile(r"^```(json)?|```$", flags=re.M)
# Greedy: spans from the first "{" to the last "}". Best-effort only; stray
# braces in surrounding prose end up inside the span and fail the parse.
_JSON_SPAN_RE = re.compile(r"\{[\s\S]*\}")

STREAM_DELIMITER = "---"
LETTER_TO_INDEX = {"A": 0, "B": 1, "C": 2}
FALLBACK_INDEX = 3


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponse(f"Invalid JSON from model: {e}. Raw output: {text[:200]}...") from e


def _validate(model, data: Any):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponse(f"Model output does not match the expected shape: {e}") from e


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text.strip()).strip()


def extract_json_span(text: str) -> str:
    """Returns the first-"{" to last-"}" span of text, or raises MalformedResponse."""
    match = _JSON_SPAN_RE.search(text.strip())
    if not match:
        raise MalformedResponse("No valid JSON found in response")
    return match.group(0)


def letter_to_index(letter: str) -> int:
    """Maps A/B/C to 0/1/2; every other value, D included, falls through to 3."""
    index = LETTER_TO_INDEX.get(letter, FALLBACK_INDEX)
    if index == FALLBACK_INDEX and letter != "D":
        logger.warning(f"Unexpected correctAnswer letter {letter!r}; treating it as option D.")
    return index


def _related_question(q: ProviderQuestion) -> RelatedQuestion:
    return RelatedQuestion(question=q.text, type=q.type, context=q.context)


# --- Explore (one-shot) ---
def parse_explore_response(text: str) -> ExploreResponse:
    payload = _validate(ExplorePayload, _loads(strip_code_fences(text)))
    paragraphs = payload.content
    return ExploreResponse(
        content="\n\n".join([paragraphs.paragraph1, paragraphs.paragraph2, paragraphs.paragraph3]),
        related_topics=[RelatedTopic(topic=t.name, type=t.type) for t in payload.related_topics],
        related_questions=[_related_question(q) for q in payload.related_questions],
    )


# --- Explore (streamed) ---
class StreamAccumulator:
    """
    Collects streamed chunks and keeps the best-known topics and questions.

    Partial JSON is expected mid-stream: a failed parse leaves the previous
    topics/questions in place and waits for more text.
    """

    def __init__(self):
        self.buffer = ""
        self.topics: List[StreamTopic] = []
        self.questions: List[RelatedQuestion] = []
        self.parse_count = 0

    def feed(self, chunk_text: str) -> StreamChunk:
        self.buffer += chunk_text
        if "}" in self.buffer:
            self._try_parse()
        return StreamChunk(
            text=self.buffer.split(STREAM_DELIMITER)[0].strip(),
            topics=list(self.topics),
            questions=list(self.questions),
        )

    def _try_parse(self) -> None:
        start = self.buffer.find("{")
        end = self.buffer.rfind("}")
        if start == -1 or end < start:
            return
        try:
            data = json.loads(self.buffer[start:end + 1])
        except json.JSONDecodeError as e:
            logger.debug(f"Streamed JSON not parseable yet: {e}")
            return
        if not isinstance(data, dict):
            return

        self.parse_count += 1
        if isinstance(data.get("topics"), list):
            topics = _valid_entries(ProviderTopic, data["topics"])
            self.topics = [StreamTopic(topic=t.name, type=t.type, reason=t.reason) for t in topics]
        if isinstance(data.get("questions"), list):
            self.questions = [_related_question(q) for q in _valid_entries(ProviderQuestion, data["questions"])]


def _valid_entries(model, entries: List[Any]) -> list:
    """Validates streamed entries one by one, skipping the ones that do not fit."""
    valid = []
    for entry in entries:
        try:
            valid.append(model.model_validate(entry))
        except ValidationError as e:
            logger.debug(f"Skipping streamed {model.__name__} entry {entry!r}: {e}")
    return valid


# --- Playground questions ---
def to_question(raw: ProviderPlaygroundQuestion, topic: str, level: int, user_context: UserContext) -> Question:
    return Question(
        text=raw.text,
        options=list(raw.options.values()),
        correct_answer=letter_to_index(raw.correct_answer),
        explanation=Explanation(correct=raw.explanation.correct, key_point=raw.explanation.key_point),
        difficulty=level,
        topic=topic,
        subtopic=raw.subtopic or topic,
        question_type="conceptual",
        age_group=str(user_context.age),
    )


def parse_playground_questions(text: str, topic: str, level: int, user_context: UserContext) -> List[Question]:
    payload = _validate(PlaygroundPayload, _loads(extract_json_span(text)))
    try:
        return [to_question(q, topic, level, user_context) for q in payload.questions]
    except ValidationError as e:
        raise MalformedResponse(f"Generated question is inconsistent: {e}") from e
