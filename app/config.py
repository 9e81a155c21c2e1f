from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Built once at startup and passed into each component; never mutated.
    """

    # App
    app_name: str = "Thread Summary Bot"
    debug: bool = False

    # Slack
    slack_bot_token: str = ""
    slack_signing_secret: str = ""
    trigger_keyword: str = "요약"

    # LLM (langchain ChatOpenAI via gen_ai_hub proxy)
    openai_model: str = "gpt-4o"
    summary_temperature: float = 0.3
    summary_max_tokens: int = 4096
    chat_temperature: float = 0.7
    chat_max_tokens: int = 2048

    # GitHub (summary archive)
    github_token: str = ""
    github_repo_owner: str = ""
    github_repo_name: str = ""
    github_default_branch: str = "main"
    archive_prefix: str = ""

    # Search over archived summaries; empty path disables search
    knowledge_base_path: str = ""
    search_max_documents: int = 10

    # Presentation
    timezone: str = "Asia/Seoul"
    response_max_length: int = 3000
    truncate_at: int = 2900

    model_config = ConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", frozen=True
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
