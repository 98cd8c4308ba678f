from pydantic_settings import BaseSettings
from pathlib import Path
from typing import Optional

# Get project root (2 levels up from this file)
PROJECT_ROOT = Path(__file__).parent.parent.parent

class Settings(BaseSettings):
    # OpenAI (key may also live in the system_settings table)
    openai_api_key: Optional[str] = None
    openai_llm_model: str = "gpt-4"
    openai_temperature: float = 0.7
    openai_max_tokens: int = 1500

    # Supabase Postgres
    postgres_host: str
    postgres_port: int = 5432
    postgres_database: str = "postgres"
    postgres_username: str = "postgres"
    postgres_password: str
    postgres_sslmode: str = "require"

    # Engine config
    log_level: str = "INFO"
    upcoming_events_limit: Optional[int] = None

    class Config:
        env_file = str(PROJECT_ROOT / ".env")
        case_sensitive = False
