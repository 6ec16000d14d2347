# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Application configuration using pydantic-settings.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Attributes:
        APP_NAME (str): Display name of the application.
        DEBUG (bool): Whether to enable debug mode.
        CORS_ORIGINS (str): Comma-separated list of allowed CORS origins.
        COACH_NAME (str): Name of the human coach, used in prompts and
            mention detection.
        OPENAI_API_KEY (str): OpenAI API key for LLM calls.
        GOOGLE_API_KEY (str): Google AI Studio key for Gemini models.
        FAST_MODEL (str): Model used for short or simple client messages.
        BALANCED_MODEL (str): Model used for emotional or complex messages.
        SYNTHESIS_MODEL (str): Model used to synthesize document sections.
        TITLE_MODEL (str): Model used to generate thread titles.
        AGENT_TEMPERATURE (float): Sampling temperature for replies.
        AGENT_MAX_TOKENS (int): Maximum output tokens for replies.
        SYNTHESIS_MAX_TOKENS (int): Maximum output tokens for session
            synthesis.
        INCREMENTAL_SYNTHESIS_MAX_TOKENS (int): Maximum output tokens for
            per-exchange synthesis.
        RECENT_MESSAGE_LIMIT (int): Number of stored messages offered to
            the conversation window.
        MIN_SESSION_MESSAGES (int): Minimum new messages required before a
            session synthesis runs.
        PLATFORM_API_URL (str): Base URL of the platform API that extracts
            text from stored files.
        FILE_EXTRACT_TIMEOUT (float): Timeout in seconds for file text
            extraction requests.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    APP_NAME: str = "Coach Partner"
    DEBUG: bool = False
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"
    COACH_NAME: str = "Gena"

    OPENAI_API_KEY: str = ""

    # Google Gemini
    GOOGLE_API_KEY: str = ""  # Google AI Studio (simple)

    # Google Cloud / Vertex AI (alternative to GOOGLE_API_KEY)
    GOOGLE_CLOUD_PROJECT: str = ""
    GOOGLE_CLOUD_LOCATION: str = ""
    GOOGLE_APPLICATION_CREDENTIALS: str = ""

    FAST_MODEL: str = "gemini-2.5-flash"
    BALANCED_MODEL: str = "gemini-2.5-pro"
    SYNTHESIS_MODEL: str = "gemini-2.5-pro"
    TITLE_MODEL: str = "gemini-2.5-flash"
    AGENT_TEMPERATURE: float = 0.7
    AGENT_MAX_TOKENS: int = 1024

    # Living document synthesis
    SYNTHESIS_MAX_TOKENS: int = 4000
    INCREMENTAL_SYNTHESIS_MAX_TOKENS: int = 2000
    MIN_SESSION_MESSAGES: int = 2

    # Conversation
    RECENT_MESSAGE_LIMIT: int = 50

    # File text extraction
    PLATFORM_API_URL: str = "http://localhost:8001"
    FILE_EXTRACT_TIMEOUT: float = 10.0

    def get_cors_origins(self) -> List[str]:
        """Parse CORS origins as list.

        Returns:
            List[str]: A list of origin URL strings split from the
                comma-separated CORS_ORIGINS setting.
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


settings = Settings()
