# Thin gateway over the configured langchain chat model
# explorer/services/llm_client.py
from typing import Any, AsyncIterator, Dict, Optional

from langchain_community.llms import Ollama
from langchain_core.output_parsers import StrOutputParser
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from explorer.services.errors import GenerationFailure
from explorer.services.prompt_library import render_request
from explorer.utils.config import Settings, validate_provider_credentials
from explorer.utils.logger import logger


def build_llm(config: Settings, temperature: float, schema: Optional[Dict[str, Any]] = None):
    """Builds a chat model for the configured provider; a schema switches on JSON output."""
    validate_provider_credentials(config)
    provider = config.llm_provider.lower()

    if provider == "google":
        json_kwargs = {"response_mime_type": "application/json", "response_schema": schema} if schema else {}
        return ChatGoogleGenerativeAI(
            google_api_key=config.google_api_key,
            model=config.google_model_name,
            temperature=temperature,
            **json_kwargs,
        )
    if provider == "openai":
        model_kwargs = {}
        if schema:
            model_kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": "structured_output", "schema": schema},
            }
        return ChatOpenAI(
            openai_api_key=config.openai_api_key,
            model_name=config.openai_model_name,
            temperature=temperature,
            model_kwargs=model_kwargs,
        )
    # Ollama only takes a bare "json" format; the schema itself travels in the prompt.
    return Ollama(
        base_url=config.ollama_base_url,
        model=config.ollama_model,
        temperature=temperature,
        format="json" if schema else None,
    )


class ModelGateway:
    def __init__(self, config: Settings, llm_factory=build_llm):
        self.config = config
        self.llm_factory = llm_factory
        logger.info(f"ModelGateway initialized for provider: {config.llm_provider}")

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float | None = None,
        schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Sends one request and returns the full response text."""
        temperature = self.config.generate_temperature if temperature is None else temperature
        prompt = render_request(system_prompt, user_prompt, schema)
        try:
            chain = self.llm_factory(self.config, temperature, schema) | StrOutputParser()
            text = await chain.ainvoke(prompt)
        except Exception as e:
            logger.exception(f"Model provider error: {e}")
            raise GenerationFailure("Failed to generate content") from e
        logger.debug(f"Model returned {len(text)} characters (schema={'yes' if schema else 'no'}).")
        return text

    async def stream(self, prompt: str, temperature: float | None = None) -> AsyncIterator[str]:
        """Yields response text incrementally as the provider produces it."""
        temperature = self.config.stream_temperature if temperature is None else temperature
        try:
            chain = self.llm_factory(self.config, temperature) | StrOutputParser()
            async for chunk in chain.astream(prompt):
                yield chunk
        except Exception as e:
            logger.exception(f"Model provider streaming error: {e}")
            raise GenerationFailure("Failed to stream content") from e
