"""Configuration settings for the Sofiya command-understanding service"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings"""

    # Server
    port: int = 8003
    debug: bool = False
    allowed_origins: List[str] = ["*"]

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # console, json

    # Languages
    default_language: str = "en"  # tie-breaker when the caller sends none
    default_personality: str = "DEFAULT"

    # Remote completion (fallback stage 1)
    completion_api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    completion_api_key: str = ""
    completion_model: str = "openai/gpt-3.5-turbo"
    completion_timeout_seconds: float = 8.0
    completion_max_tokens: int = 300
    completion_referer: str = "https://sofiya-ai.vercel.app"
    completion_title: str = "Sofiya AI Assistant"

    # Fallback stage 2
    web_search_url: str = "https://www.google.com/search?q={query}"
    youtube_search_url: str = "https://www.youtube.com/results?search_query={query}"

    # Limits
    max_utterance_length: int = 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
    )


settings = Settings()
