# explorer/utils/config.py
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env file before defining settings
load_dotenv()

SUPPORTED_PROVIDERS = ("google", "openai", "ollama")


class Settings(BaseSettings):
    log_level: str = "INFO"

    # --- LLM Provider Configuration ---
    llm_provider: str = "google"

    # Google Gemini specific
    google_api_key: str | None = None
    google_model_name: str = "gemini-1.5-pro"

    # OpenAI specific
    openai_api_key: str | None = None
    openai_model_name: str = "gpt-4o-mini"

    # Ollama specific
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "mistral"

    # Sampling temperatures for one-shot and streamed generation
    generate_temperature: float = 0.7
    stream_temperature: float = 0.9

    # Rate limiter ceilings (requests per window)
    rate_limit_per_minute: int = 15
    rate_limit_per_hour: int = 250
    rate_limit_per_day: int = 500

    # Durable storage for the rate limiter slots
    database_url: str = "sqlite+aiosqlite:///./explorer.db"

    # Firestore chat history
    firestore_project: str | None = None
    firestore_credentials_path: str | None = None
    chat_history_collection: str = "chatHistory"
    history_limit: int = 50

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def validate_provider_credentials(config: Settings) -> None:
    """Raises ValueError when the configured provider is missing its credentials."""
    provider = config.llm_provider.lower()
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unsupported LLM_PROVIDER: {config.llm_provider}")
    if provider == "google" and not config.google_api_key:
        raise ValueError("LLM_PROVIDER is 'google' but GOOGLE_API_KEY is not set in .env")
    if provider == "openai" and not config.openai_api_key:
        raise ValueError("LLM_PROVIDER is 'openai' but OPENAI_API_KEY is not set in .env")
