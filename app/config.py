from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/fitforge"
    planner_api_key: str | None = None
    log_level: str = "INFO"

    # Generation service (OpenAI chat completions)
    openai_api_key: str | None = None
    openai_model: str = "gpt-4-turbo"
    openai_json_mode: bool = True  # response_format=json_object; disable for models without it
    openai_timeout_seconds: float = 90.0

    # Prompt tuning
    fat_loss_deficit_kcal: float = 500.0  # kcal/day requested for fat_loss goals

    # Plan store
    store_auto_create: bool = True  # CREATE TABLE IF NOT EXISTS planner_state on startup

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
