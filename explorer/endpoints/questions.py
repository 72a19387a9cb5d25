# Endpoint for generating playground quiz questions
# explorer/endpoints/questions.py
from fastapi import APIRouter, Depends, HTTPException
from typing import List

from explorer.models.question import Question, QuestionRequest, UserContext
from explorer.services.api import LearningApi, get_learning_api
from explorer.services.errors import GenerationFailure, RateLimitExceeded
from explorer.utils.logger import logger

router = APIRouter()

@router.post("/", response_model=List[Question])
async def generate_questions(request: QuestionRequest, api: LearningApi = Depends(get_learning_api)):
    logger.info(f"Questions requested for topic '{request.topic}' at level {request.level}")
    try:
        return await api.get_question(request.topic, request.level, UserContext(age=request.age))
    except RateLimitExceeded as e:
        raise HTTPException(status_code=429, detail=str(e))
    except GenerationFailure as e:
        raise HTTPException(status_code=502, detail=str(e))
