from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Validated settings (env-driven), keeping config out of code for easy extension."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    out_dir: str = Field(default="out", alias="OUT_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_to_file: bool = Field(default=True, alias="LOG_TO_FILE")

    # "sequential" runs the single-criterion engine once per criterion.
    path_engine: str = Field(default="interleaved", alias="PATH_ENGINE")

    route_cache_enabled: bool = Field(default=False, alias="ROUTE_CACHE_ENABLED")
    route_cache_ttl_s: int = Field(default=600, ge=1, alias="ROUTE_CACHE_TTL_S")
    route_cache_max_entries: int = Field(
        default=1024,
        ge=1,
        le=1_000_000,
        alias="ROUTE_CACHE_MAX_ENTRIES",
    )

    input_encoding: str = Field(default="utf-8", alias="INPUT_ENCODING")
    output_encoding: str = Field(default="utf-8", alias="OUTPUT_ENCODING")
    no_route_marker: str = Field(default="no route", alias="NO_ROUTE_MARKER")

    @model_validator(mode="after")
    def _normalise_engine(self) -> "Settings":
        engine = str(self.path_engine or "interleaved").strip().lower()
        if engine not in {"interleaved", "sequential"}:
            engine = "interleaved"
        self.path_engine = engine
        return self


settings = Settings()
