"""
Application configuration settings.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[".env", "../.env"], case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field("Deckwright API", alias="APP_NAME")

    # Environment
    environment: str = Field("development", alias="ENVIRONMENT")
    debug: bool = Field(False, alias="DEBUG")

    # OpenAI/LLM
    openai_api_key: str = Field("dummy-key-for-test", alias="OPENAI_API_KEY")
    openai_model: str = Field("gpt-4o-mini", alias="OPENAI_MODEL")
    openai_base_url: Optional[str] = Field(None, alias="OPENAI_BASE_URL")
    openai_timeout: float = Field(60.0, alias="OPENAI_TIMEOUT")
    openai_max_retries: int = Field(2, alias="OPENAI_MAX_RETRIES")
    llm_max_tokens: int = Field(4000, alias="OPENAI_MAX_TOKENS")

    # Synthesis
    plan_temperature: float = Field(0.7, alias="PLAN_TEMPERATURE")
    repair_temperature: float = Field(0.3, alias="REPAIR_TEMPERATURE")
    refine_temperature: float = Field(0.2, alias="REFINE_TEMPERATURE")
    refine_plans: bool = Field(True, alias="REFINE_PLANS")

    # Rendering
    default_theme: str = Field("minimal", alias="DEFAULT_THEME")
    watermark_text: str = Field("Made with Deckwright", alias="WATERMARK_TEXT")
    watermark_logo_path: Optional[str] = Field(None, alias="WATERMARK_LOGO_PATH")
    document_author: str = Field("Deckwright", alias="DOCUMENT_AUTHOR")
    document_company: str = Field("Deckwright", alias="DOCUMENT_COMPANY")

    # CORS
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("json", alias="LOG_FORMAT")

    def get_cors_origins(self) -> list[str]:
        """Parse CORS origins from string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]


_settings = None


def get_settings() -> Settings:
    """Get settings instance (useful for dependency injection)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
