"""Application configuration."""

from pathlib import Path

from pydantic import Field
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings

# Environment variables checked for the API key, first match wins.
API_KEY_ENV_VARS = ("KNOWLEDGEBOT_API_KEY", "API_KEY")


class Settings(BaseSettings):
    model_config = {"env_prefix": "KNOWLEDGEBOT_", "env_file": ".env", "extra": "ignore",
                    "populate_by_name": True}

    # Paths
    data_dir: Path = Path("data")

    # LLM
    llm_provider: str = "openai"
    llm_model: str = "gpt-4o"

    # Logging
    log_level: str = "WARNING"

    # API key — read from KNOWLEDGEBOT_API_KEY with the bare API_KEY as
    # fallback. Empty means the assistant is unconfigured.
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices(*API_KEY_ENV_VARS),
    )

    @property
    def knowledge_path(self) -> Path:
        return self.data_dir / "knowledge.json"


def get_settings() -> Settings:
    return Settings()
