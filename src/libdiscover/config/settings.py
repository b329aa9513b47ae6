"""Application settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (LIBDISCOVER_ prefix)
  3. Default values

Missing sections are never an error: every field has a default that
leaves the corresponding feature switched off.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class IndexSettings(BaseModel):
    """Location of the Solr index (``[Index]`` section)."""

    url: str = Field(default="http://localhost:8983/solr", description="Base Solr URL, without core name")
    timeout: float | None = Field(default=None, description="Request timeout in seconds (unset = 30)")
    proxy: str | None = Field(default=None, description="Optional HTTP proxy URL for index requests")

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class GeneralSearchSettings(BaseModel):
    """Feature switches from the ``[General]`` section of the search config."""

    highlighting: bool = Field(default=False, description="Highlight matched terms in results")
    snippets: bool = Field(default=False, description="Show highlighted snippets (implies highlighting)")
    spellcheck: bool = Field(default=False, description="Request spelling suggestions for basic searches")


class SearchesSettings(BaseModel):
    """Search behavior configuration."""

    general: GeneralSearchSettings = Field(default_factory=GeneralSearchSettings)
    hidden_filters: dict[str, str] = Field(
        default_factory=dict,
        description="Field -> value filters applied to every search as exact matches",
    )
    raw_hidden_filters: list[str] = Field(
        default_factory=list,
        description="Literal filter queries applied to every search",
    )
    specs_dirs: list[str] = Field(
        default_factory=list,
        description="Directories searched for YAML search specs before the bundled ones",
    )

    @field_validator("raw_hidden_filters", mode="before")
    @classmethod
    def _parse_raw_filters(cls, v: Any) -> list[str]:
        """Accept a single filter expression (env var) or a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [v] if v else []
        return [str(item) for item in v]


class RecommendSettings(BaseModel):
    """Recommendation module configuration."""

    authority_enabled: bool = Field(default=True, description="Offer authority heading recommendations")
    authority_filters: str = Field(
        default="",
        description="Colon-delimited field/expression pairs restricting authority recommendations",
    )


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the LIBDISCOVER_ prefix.
    Nested settings use double underscores: LIBDISCOVER_INDEX__URL=http://solr:8983/solr

    Example:
        LIBDISCOVER_INDEX__TIMEOUT=10
        LIBDISCOVER_SEARCHES__GENERAL__HIGHLIGHTING=true
        LIBDISCOVER_RECOMMEND__AUTHORITY_FILTERS=record_type:Heading
    """

    model_config = {
        "env_prefix": "LIBDISCOVER_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    # Application metadata
    app_name: str = Field(default="libdiscover", description="Application name")
    debug: bool = Field(default=False, description="Debug mode: FastAPI debug tracebacks and DEBUG logging")

    # Component settings
    server: ServerSettings = Field(default_factory=ServerSettings)
    index: IndexSettings = Field(default_factory=IndexSettings)
    searches: SearchesSettings = Field(default_factory=SearchesSettings)
    recommend: RecommendSettings = Field(default_factory=RecommendSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Sections present in the YAML file win over environment variables;
        sections it omits are still read from the environment.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
