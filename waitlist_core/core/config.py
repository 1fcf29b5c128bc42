"""Application configuration for Waitlist Core.

Configuration is loaded from environment variables, making the service suitable
for container-based deployments.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_path() -> Path:
    # Resolve relative to the package, not the current working directory.
    return Path(__file__).resolve().parents[1] / "data" / "sample_patients.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    host: str = "localhost"
    port: int = 3000
    log_level: str = "INFO"

    patients_data_path: str | None = None
    top_patients_limit: int = 10

    cors_origins: list[str] = ["*"]

    @property
    def resolved_data_path(self) -> Path:
        if self.patients_data_path:
            return Path(self.patients_data_path)

        return _default_data_path()


settings = Settings()
