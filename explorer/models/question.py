# Data model for generated playground questions
# explorer/models/question.py
from pydantic import BaseModel, Field, model_validator
from typing import List

class UserContext(BaseModel):
    age: int

class Explanation(BaseModel):
    correct: str
    key_point: str

class Question(BaseModel):
    text: str
    options: List[str]
    correct_answer: int  # 0-based index into options
    explanation: Explanation
    difficulty: int
    topic: str
    subtopic: str = ""
    question_type: str = "conceptual"
    age_group: str

    @model_validator(mode="after")
    def check_correct_answer_in_range(self):
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} is out of range for {len(self.options)} options"
            )
        return self

class QuestionRequest(BaseModel):
    topic: str
    level: int = Field(default=1, ge=1)
    age: int = Field(gt=0)
