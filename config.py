"""Configuration management for Keesti.

Reads configuration from ~/.config/keesti.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import tomllib
import tomli_w


DEFAULT_API_BASE_URL = "http://localhost:3001"


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    api_base_url: str = DEFAULT_API_BASE_URL
    commit_timeout: Optional[float] = None

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "keesti"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="keesti.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
            api_base_url=DEFAULT_API_BASE_URL,
            commit_timeout=None,
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "keesti.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return parse_config(data)


def parse_config(data: dict) -> Config:
    """Build a Config from parsed TOML data, filling in defaults.

    Args:
        data: Dictionary as returned by tomllib.

    Returns:
        Config object.
    """
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "keesti"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "keesti.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    api_config = data.get("api", {})
    api_base_url = api_config.get("base_url", DEFAULT_API_BASE_URL)

    # 0 or missing means wait for commits forever
    tree_config = data.get("tree", {})
    commit_timeout = tree_config.get("commit_timeout") or None

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        api_base_url=api_base_url.rstrip("/"),
        commit_timeout=float(commit_timeout) if commit_timeout else None,
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    # tomli_w has no null, so an unset timeout is written as 0
    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "api": {
            "base_url": config.api_base_url,
        },
        "tree": {
            "commit_timeout": config.commit_timeout or 0,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
