"""Configuration schema using Pydantic.

Persisted to ~/.bitbridge/config.json; BITBRIDGE_* environment variables
(nested with ``__``, e.g. BITBRIDGE_SERVER__PORT) override the file.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerConfig(BaseModel):
    """WebSocket listener the game's Remote API connects to."""
    host: str = "127.0.0.1"
    port: int = 18080
    single_shot: bool = False  # Stop after the first connection closes


class SyncConfig(BaseModel):
    """Which local files a push uploads and where they land."""
    project_root: str = ".."  # One level above the bridge's own directory
    bridge_dir_name: str = "file-manager"  # Never uploaded
    script_extension: str = ".js"
    remote_server: str = "home"
    # Relative to project_root; empty disables saving the definition file.
    definitions_path: str = "external/NetscriptDefinitions.d.ts"

    @field_validator("script_extension")
    @classmethod
    def _dotted(cls, value: str) -> str:
        value = value.strip()
        return value if value.startswith(".") else f".{value}"

    @property
    def root_path(self) -> Path:
        return Path(self.project_root).expanduser().resolve()

    @property
    def definitions_file(self) -> Path | None:
        if not self.definitions_path:
            return None
        return self.root_path / self.definitions_path


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: bool = True  # Rotating file under ~/.bitbridge/logs


class Config(BaseSettings):
    """Root configuration for bitbridge."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="BITBRIDGE_",
        env_nested_delimiter="__",
    )

    @classmethod
    def defaults(cls) -> "Config":
        """Built-in defaults only; environment overrides are not applied."""
        return cls.model_construct(server=ServerConfig(), sync=SyncConfig(), logging=LoggingConfig())

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment beats values loaded from config.json.
        return env_settings, init_settings, dotenv_settings, file_secret_settings
