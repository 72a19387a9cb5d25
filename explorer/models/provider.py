# Shapes of the JSON returned by the model provider, before normalization
# explorer/models/provider.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

from explorer.models.enums import TopicRelation, QuestionKind


class ProviderTopic(BaseModel):
    name: str
    type: TopicRelation
    reason: str = ""


class ProviderQuestion(BaseModel):
    text: str
    type: QuestionKind
    context: str = ""


class ExploreParagraphs(BaseModel):
    paragraph1: str
    paragraph2: str
    paragraph3: str


class ExplorePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: ExploreParagraphs
    related_topics: List[ProviderTopic] = Field(alias="relatedTopics")
    related_questions: List[ProviderQuestion] = Field(alias="relatedQuestions")


class ProviderExplanation(BaseModel):
    correct: str
    key_point: str


class ProviderPlaygroundQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    options: Dict[str, str]
    correct_answer: str = Field(alias="correctAnswer")
    explanation: ProviderExplanation
    subtopic: Optional[str] = None


class PlaygroundPayload(BaseModel):
    questions: List[ProviderPlaygroundQuestion]
