"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Policy lifecycle settings loaded from environment variables.

    All settings have sensible defaults for development and tests.

    Environment Variables:
        PREPROCESS_DELAY_MS: Nominal delay of the preprocessing job
        INDEXING_DELAY_MS: Nominal delay of the search indexing job
        PREPROCESS_FAILURE_MARKER: Primary file names containing this fail preprocessing
        INDEXING_FAILURE_MARKER: Change summaries containing this fail indexing
        SYSTEM_ACTOR: Actor recorded on job-driven audit entries
        SEED_DEMO_DATA: Load demo policy documents on first hydration
        DOCUMENT_ID_PREFIX: Prefix used when suggesting new document ids
        REVIEW_SOURCE_SYSTEM: Source system label on review work items
        REVIEW_DEPARTMENT: Department label on review work items
        SHORT_SUMMARY_THRESHOLD: Change summaries shorter than this get a quality warning
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default True)
    """

    # Background pipelines
    PREPROCESS_DELAY_MS: int = Field(450, ge=0)
    INDEXING_DELAY_MS: int = Field(650, ge=0)
    PREPROCESS_FAILURE_MARKER: str = "fail"
    INDEXING_FAILURE_MARKER: str = "FAIL_INDEX"
    SYSTEM_ACTOR: str = "SYSTEM"

    # Store
    SEED_DEMO_DATA: bool = False
    DOCUMENT_ID_PREFIX: str = "POL"

    # Review queue linkage
    REVIEW_SOURCE_SYSTEM: str = "POLICY_PIPELINE"
    REVIEW_DEPARTMENT: str = "Policy/Regulation"
    SHORT_SUMMARY_THRESHOLD: int = Field(6, ge=0)

    # Application
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
