import json

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Dashboard Reporting API"
    DEBUG: bool = False

    API_V1_PREFIX: str = "/api/v1"

    BACKEND_CORS_ORIGINS: str = '["http://localhost:3000","http://localhost:5173"]'

    # Analytics provider (Plausible Stats API v1)
    PLAUSIBLE_API_URL: str = "https://plausible.io/api/v1"
    PLAUSIBLE_API_KEY: str = ""
    PLAUSIBLE_SITE_ID: str = ""

    # Records store (Directus REST API)
    DIRECTUS_API_URL: str = "http://localhost:8055"
    DIRECTUS_API_KEY: str = ""

    # Per-candidate timeout before the fetcher moves on to the next strategy
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0

    # Calendar days are bucketed in this zone
    REPORTING_TIMEZONE: str = "Europe/Amsterdam"
    DEFAULT_PERIOD: str = "30d"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins(self) -> list[str]:
        if isinstance(self.BACKEND_CORS_ORIGINS, str):
            try:
                parsed: list[str] = json.loads(self.BACKEND_CORS_ORIGINS)
                return parsed
            except json.JSONDecodeError:
                return ["http://localhost:3000"]
        return self.BACKEND_CORS_ORIGINS


settings = Settings()
