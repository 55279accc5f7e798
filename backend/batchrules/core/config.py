from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BATCHRULES_",
        extra="ignore",
    )

    # App
    app_name: str = "Batch Rules"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    json_logs: bool = True  # env: BATCHRULES_JSON_LOGS; False switches to the console renderer

    # Rulesets
    # JSON file of {"cannabis": {...}, "produce": {...}} replacing the compiled-in tables (empty = built-in)
    ruleset_path: str = ""


@lru_cache
def get_settings() -> Settings:
    return Settings()
