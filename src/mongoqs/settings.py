"""Settings for mongoqs."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class MongoQSSettings(BaseSettings):
    """Process-wide defaults for query string parsers."""

    LOG_LEVEL: str = "INFO"

    # Value coercion defaults, overridable per parser via `string=...`
    STRING_TO_BOOLEAN: bool = True
    STRING_TO_NUMBER: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = MongoQSSettings()
