from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "AI Sentinel Moderation API"
    log_level: str = "INFO"
    log_file: str | None = None

    # Classifier
    openai_api_key: str | None = None
    openai_moderation_url: str = "https://api.openai.com/v1/moderations"
    request_timeout: float = 30.0

    # Report store
    report_store_backend: Literal["supabase", "database"] = "supabase"
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None
    reports_table: str = "community_reports"
    database_url: str = "sqlite:///./ai_sentinel.db"

    class Config:
        env_file = ".env"

    def missing_settings(self) -> List[str]:
        """Return the environment names of required settings that are unset."""
        required = {"OPENAI_API_KEY": self.openai_api_key}
        if self.report_store_backend == "supabase":
            required["SUPABASE_URL"] = self.supabase_url
            required["SUPABASE_SERVICE_ROLE_KEY"] = self.supabase_service_role_key
        else:
            required["DATABASE_URL"] = self.database_url
        return [name for name, value in required.items() if not value]


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency: environment is read once per request."""
    return Settings()
