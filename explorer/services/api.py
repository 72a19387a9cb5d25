# Public entry points: rate-limit gate, generation, and error shaping
# explorer/services/api.py
from typing import AsyncIterator, List

from explorer.models.explore import ExploreResponse, StreamChunk
from explorer.models.question import Question, UserContext
from explorer.services.errors import GenerationFailure, RateLimitExceeded
from explorer.services.generation_service import ChunkCallback, GenerationService
from explorer.services.llm_client import ModelGateway
from explorer.services.rate_limiter import RateLimiter, SqlSlotStore
from explorer.utils.config import Settings, settings
from explorer.utils.db import AsyncSessionLocal
from explorer.utils.logger import logger


def transform_question(raw: Question) -> Question:
    """Normalizes optional fields of a generated question to their public defaults."""
    return raw.model_copy(
        update={
            "subtopic": raw.subtopic or "",
            "question_type": raw.question_type or "conceptual",
        }
    )


class LearningApi:
    def __init__(self, rate_limiter: RateLimiter, generation_service: GenerationService):
        self.rate_limiter = rate_limiter
        self.generation_service = generation_service

    async def _gate(self) -> None:
        if not await self.rate_limiter.check_limit():
            raise RateLimitExceeded()

    async def get_question(self, topic: str, level: int, user_context: UserContext) -> List[Question]:
        await self._gate()
        try:
            questions = await self.generation_service.get_playground_questions(topic, level, user_context)
            return [transform_question(q) for q in questions]
        except Exception as e:
            logger.exception(f"Question generation error for topic '{topic}': {e}")
            raise GenerationFailure("Failed to generate question") from e

    async def explore(self, query: str, user_context: UserContext) -> ExploreResponse:
        await self._gate()
        try:
            return await self.generation_service.get_explore_content(query, user_context)
        except Exception as e:
            logger.exception(f"Explore error for query '{query}': {e}")
            raise GenerationFailure("Failed to explore topic") from e

    async def iter_explore_content(self, query: str, user_context: UserContext) -> AsyncIterator[StreamChunk]:
        # Streaming goes through the same gate as the one-shot calls.
        await self._gate()
        try:
            async for update in self.generation_service.iter_explore_content(query, user_context):
                yield update
        except Exception as e:
            logger.exception(f"Stream error for query '{query}': {e}")
            raise GenerationFailure("Failed to stream content") from e

    async def stream_explore_content(self, query: str, user_context: UserContext, on_chunk: ChunkCallback) -> None:
        await self._gate()
        try:
            await self.generation_service.stream_explore_content(query, user_context, on_chunk)
        except Exception as e:
            logger.exception(f"Stream error for query '{query}': {e}")
            raise GenerationFailure("Failed to stream content") from e


def build_learning_api(config: Settings) -> LearningApi:
    rate_limiter = RateLimiter(SqlSlotStore(AsyncSessionLocal), config)
    generation_service = GenerationService(ModelGateway(config))
    return LearningApi(rate_limiter, generation_service)


_learning_api: LearningApi | None = None


def get_learning_api() -> LearningApi:
    """FastAPI dependency returning the process-wide LearningApi."""
    global _learning_api
    if _learning_api is None:
        _learning_api = build_learning_api(settings)
    return _learning_api
