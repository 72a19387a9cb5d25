# Model layer: builds each request, calls the provider and normalizes the answer
# explorer/services/generation_service.py
import inspect
import random
from typing import AsyncIterator, Awaitable, Callable, List, Union

from explorer.models.explore import ExploreResponse, StreamChunk
from explorer.models.question import Question, UserContext
from explorer.services.llm_client import ModelGateway
from explorer.services.prompt_library import build_explore_prompt, build_playground_prompt, build_stream_prompt
from explorer.services.response_parser import StreamAccumulator, parse_explore_response, parse_playground_questions
from explorer.services.shuffler import shuffle_options
from explorer.utils.logger import logger

ChunkCallback = Callable[[StreamChunk], Union[None, Awaitable[None]]]


class GenerationService:
    def __init__(self, gateway: ModelGateway, rng: random.Random | None = None):
        self.gateway = gateway
        self.rng = rng or random.Random()

    async def get_explore_content(self, query: str, user_context: UserContext) -> ExploreResponse:
        prompt = build_explore_prompt(query, user_context.age)
        text = await self.gateway.generate(prompt.system_prompt, prompt.user_prompt)
        response = parse_explore_response(text)
        logger.info(
            f"Explore content for '{query}': {len(response.related_topics)} topics, "
            f"{len(response.related_questions)} questions."
        )
        return response

    async def iter_explore_content(self, query: str, user_context: UserContext) -> AsyncIterator[StreamChunk]:
        """Yields the best-known explore state after every streamed chunk."""
        accumulator = StreamAccumulator()
        async for chunk_text in self.gateway.stream(build_stream_prompt(query, user_context.age)):
            yield accumulator.feed(chunk_text)
        if accumulator.parse_count == 0:
            logger.warning(f"Stream for '{query}' finished without any parseable topics or questions.")
        else:
            logger.debug(f"Stream for '{query}' finished after {accumulator.parse_count} successful metadata parses.")

    async def stream_explore_content(self, query: str, user_context: UserContext, on_chunk: ChunkCallback) -> None:
        async for update in self.iter_explore_content(query, user_context):
            result = on_chunk(update)
            if inspect.isawaitable(result):
                await result

    async def get_playground_questions(self, topic: str, level: int, user_context: UserContext) -> List[Question]:
        prompt = build_playground_prompt(topic, self.rng)
        logger.debug(f"Generating playground questions for '{topic}' with aspect '{prompt.aspect.value}'.")
        text = await self.gateway.generate(prompt.system_prompt, prompt.user_prompt, schema=prompt.schema)
        questions = parse_playground_questions(text, topic, level, user_context)
        return [shuffle_options(q, self.rng) for q in questions]
