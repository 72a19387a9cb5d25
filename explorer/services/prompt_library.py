# explorer/services/prompt_library.py
import json
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

from langchain_core.prompts import PromptTemplate

from explorer.models.enums import Aspect

EXPLORE_SYSTEM_PROMPT = """You are a Gen-Z tutor who explains complex topics concisely considering you are teaching someone with a low IQ.
First, identify the domain of the topic from these categories:
- SCIENCE: Physics, Chemistry, Biology
- MATHEMATICS: Algebra, Calculus, Geometry
- TECHNOLOGY: Computer Science, AI, Robotics
- MEDICAL: Anatomy, Healthcare, Medicine
- HISTORY: World History, Civilizations
- BUSINESS: Economics, Finance, Marketing
- LAW: Legal Systems, Rights
- PSYCHOLOGY: Human Behavior, Development
- CURRENT_AFFAIRS: Global Events, Politics
- GENERAL: Any other topic"""

PROMPT_LIBRARY = {
    "explore_user": PromptTemplate.from_template(
        """Explain "{query}" in approximately three 20-30 word paragraphs:
1. Basic definition without using words like imagine
2. more details
3. Real-world application examples without using the word real world application
Make it engaging for someone aged {age}.

Return a JSON object with this shape:
{{
  "content": {{"paragraph1": "...", "paragraph2": "...", "paragraph3": "..."}},
  "relatedTopics": [{{"name": "...", "type": "prerequisite|extension|application|parallel|deeper", "reason": "..."}}],
  "relatedQuestions": [{{"text": "...", "type": "curiosity|mechanism|causality|innovation|insight", "context": "..."}}]
}}"""
    ),
    "explore_stream": PromptTemplate.from_template(
        """Explain "{query}" using current social media trends, memes, and pop culture references.
Keep it to three short paragraphs suitable for someone aged {age}.
After the explanation write a line containing only --- and then a JSON object:
{{"topics": [{{"name": "...", "type": "prerequisite|extension|application|parallel|deeper", "reason": "..."}}],
 "questions": [{{"text": "...", "type": "curiosity|mechanism|causality|innovation|insight", "context": "..."}}]}}"""
    ),
    "playground_system": PromptTemplate.from_template(
        """Generate 5 UNIQUE multiple-choice question about {topic}.
Focus on: {aspect}
The question should in a certain JSON format which is provided."""
    ),
    "request_envelope": PromptTemplate.from_template(
        "{system_prompt}\n\nUser Query: {user_prompt}\n\nProvide your response in JSON format."
    ),
    "request_envelope_schema": PromptTemplate.from_template(
        "{system_prompt}\n\nUser Query: {user_prompt}\n\n"
        "Provide your response in JSON format matching this JSON schema:\n{schema_json}"
    ),
}

_STRING = {"type": "string"}

PLAYGROUND_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "questions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "text": _STRING,
                    "options": {
                        "type": "object",
                        "properties": {"A": _STRING, "B": _STRING, "C": _STRING, "D": _STRING},
                        "required": ["A", "B", "C", "D"],
                    },
                    "correctAnswer": {"type": "string", "enum": ["A", "B", "C", "D"]},
                    "explanation": {
                        "type": "object",
                        "properties": {"correct": _STRING, "key_point": _STRING},
                    },
                    "subtopic": _STRING,
                },
            },
        },
    },
}


@dataclass(frozen=True)
class PromptSpec:
    system_prompt: str
    user_prompt: str
    schema: Optional[Dict[str, Any]] = None
    aspect: Optional[Aspect] = None


def build_explore_prompt(query: str, age: int) -> PromptSpec:
    user_prompt = PROMPT_LIBRARY["explore_user"].format(query=query, age=age)
    return PromptSpec(system_prompt=EXPLORE_SYSTEM_PROMPT, user_prompt=user_prompt)


def build_stream_prompt(query: str, age: int) -> str:
    return PROMPT_LIBRARY["explore_stream"].format(query=query, age=age)


def choose_aspect(rng: random.Random | None = None) -> Aspect:
    return (rng or random).choice(list(Aspect))


def build_playground_prompt(topic: str, rng: random.Random | None = None) -> PromptSpec:
    """Builds the question-generation request; the only impurity is the aspect draw."""
    aspect = choose_aspect(rng)
    system_prompt = PROMPT_LIBRARY["playground_system"].format(
        topic=topic, aspect=aspect.value.replace("_", " ")
    )
    return PromptSpec(system_prompt=system_prompt, user_prompt=topic, schema=PLAYGROUND_SCHEMA, aspect=aspect)


def render_request(system_prompt: str, user_prompt: str, schema: Optional[Dict[str, Any]] = None) -> str:
    """Wraps the prompts in the request envelope; a schema is spelled out for providers that cannot enforce it."""
    if schema is None:
        return PROMPT_LIBRARY["request_envelope"].format(system_prompt=system_prompt, user_prompt=user_prompt)
    return PROMPT_LIBRARY["request_envelope_schema"].format(
        system_prompt=system_prompt, user_prompt=user_prompt, schema_json=json.dumps(schema, indent=2)
    )
