from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    port: int = 8000
    host: str = "0.0.0.0"

    openfda_api_key: Optional[str] = None  # env: OPENFDA_API_KEY
    openfda_base_url: str = "https://api.fda.gov/food/enforcement.json"  # env: OPENFDA_BASE_URL
    # None leaves the requests default in place
    openfda_timeout: Optional[float] = None  # env: OPENFDA_TIMEOUT


def get_settings() -> Settings:
    return Settings()
