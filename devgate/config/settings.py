"""Runtime settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DEVGATE_", extra="ignore")

    app_name: str = "devgate"
    log_level: str = "info"
    # empty string disables the rotating log file, stderr only
    log_file: str = ""
    config_dir: str = "app/config"
    parameters_file: str = "parameters.yml"
    # execution mode of the server running this process, e.g. "cli-server" for a dev server
    sapi_name: str = ""
    protected_path_prefixes: list[str] = Field(default_factory=lambda: ["/_debug"])


settings = Settings()
