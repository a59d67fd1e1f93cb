from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistrySettings(BaseSettings):
    model_config = SettingsConfigDict(extra="forbid")

    database_url: str
    log_level: str = "info"
    admin_token: str = "dev-admin"

    # The generator truncates every table; keep it off outside dev/test.
    allow_seed: bool = False

    tracing_enabled: bool = False
    max_report_rows: int = 500


SETTINGS = RegistrySettings()
