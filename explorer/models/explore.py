# Data models for explore content, both one-shot and streamed
# explorer/models/explore.py
from pydantic import BaseModel, Field
from typing import List

from explorer.models.enums import TopicRelation, QuestionKind

class RelatedTopic(BaseModel):
    topic: str
    type: TopicRelation

class RelatedQuestion(BaseModel):
    question: str
    type: QuestionKind
    context: str

class ExploreResponse(BaseModel):
    content: str
    related_topics: List[RelatedTopic] = Field(default_factory=list)
    related_questions: List[RelatedQuestion] = Field(default_factory=list)

class StreamTopic(BaseModel):
    topic: str
    type: TopicRelation
    reason: str = ""

class StreamChunk(BaseModel):
    """Best-known state of a streamed explore response after one chunk."""
    text: str = ""
    topics: List[StreamTopic] = Field(default_factory=list)
    questions: List[RelatedQuestion] = Field(default_factory=list)

class ExploreRequest(BaseModel):
    query: str = Field(min_length=1)
    age: int = Field(gt=0)
