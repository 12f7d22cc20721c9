# ABOUTME: Configuration loading and validation for notion-blog.
# ABOUTME: Parses config.yaml into validated dataclasses.

from dataclasses import dataclass, field
from pathlib import Path
import os
import yaml


DEFAULT_FETCH_TIMEOUT = 30.0  # seconds
ENVIRONMENTS = ("development", "production")


class ConfigError(Exception):
    """Raised when configuration is invalid."""
    pass


@dataclass
class NotionConfig:
    """Where to find Notion credentials and how hard to hit the API."""
    token_env: str = "NOTION_API_KEY"
    database_id_env: str = "NOTION_DATABASE_ID"
    calls_per_second: float = 2.5

    def __post_init__(self):
        if self.calls_per_second <= 0:
            raise ConfigError(f"calls_per_second must be positive, got {self.calls_per_second}")

    def get_token(self) -> str:
        """Retrieve the Notion token from environment variable."""
        token = os.environ.get(self.token_env)
        if not token:
            raise ConfigError(f"Environment variable '{self.token_env}' not set")
        return token

    def get_database_id(self) -> str:
        """Retrieve the posts database ID from environment variable."""
        database_id = os.environ.get(self.database_id_env)
        if not database_id:
            raise ConfigError(f"Environment variable '{self.database_id_env}' not set")
        return database_id


@dataclass
class Config:
    """Main configuration for notion-blog."""
    public_dir: Path = Path("public")
    site_url: str = "http://localhost:8000"
    fetch_timeout_seconds: float = DEFAULT_FETCH_TIMEOUT
    environment: str = "production"
    schedule: str | None = None
    notion: NotionConfig = field(default_factory=NotionConfig)

    def __post_init__(self):
        if self.fetch_timeout_seconds <= 0:
            raise ConfigError(
                f"fetch_timeout_seconds must be positive, got {self.fetch_timeout_seconds}"
            )
        if self.environment not in ENVIRONMENTS:
            raise ConfigError(
                f"environment must be 'development' or 'production', got '{self.environment}'"
            )
        self.site_url = self.site_url.rstrip("/")

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


def load_config(path: Path) -> Config:
    """Load and validate configuration from a YAML file."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}")

    # An empty file is a valid "all defaults" config
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a YAML mapping")

    notion_raw = raw.get("notion") or {}
    if not isinstance(notion_raw, dict):
        raise ConfigError("'notion' must be a mapping")

    defaults = NotionConfig()
    notion = NotionConfig(
        token_env=notion_raw.get("token_env", defaults.token_env),
        database_id_env=notion_raw.get("database_id_env", defaults.database_id_env),
        calls_per_second=_as_float(
            notion_raw.get("calls_per_second", defaults.calls_per_second), "notion.calls_per_second"
        ),
    )

    public_dir = Path(raw.get("public_dir", "public"))
    # Relative paths are resolved against the config file location
    if not public_dir.is_absolute():
        public_dir = path.parent / public_dir

    return Config(
        public_dir=public_dir,
        site_url=str(raw.get("site_url", Config.site_url)),
        fetch_timeout_seconds=_as_float(
            raw.get("fetch_timeout_seconds", DEFAULT_FETCH_TIMEOUT), "fetch_timeout_seconds"
        ),
        environment=raw.get("environment", "production"),
        schedule=raw.get("schedule"),
        notion=notion,
    )


def _as_float(value, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}")
