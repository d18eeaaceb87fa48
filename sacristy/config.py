import os
import re
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so env vars are available for YAML interpolation
_env_file = Path(__file__).parent.parent / ".env"
load_dotenv(_env_file)

# Pattern to match $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def get_config_path() -> Path:
    """Return the app.yaml path, honouring SACRISTY_CONFIG when set."""
    override = os.environ.get("SACRISTY_CONFIG")
    if override:
        return Path(override)
    return Path.cwd() / "app.yaml"


def load_app_config() -> dict:
    """Load and parse app.yaml with environment variable interpolation."""
    config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"app.yaml not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config)


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite+aiosqlite:///./sacristy.db"
    pool_size: int = 5
    pool_overflow: int = 10
    pool_timeout: int = 30
    echo: bool = False
    create_all: bool = True


class S3Config(BaseModel):
    """S3-compatible bucket settings."""

    bucket: str = ""
    region: str = "us-east-1"
    endpoint_url: str = ""
    access_key_id: str = ""
    secret_access_key: str = ""
    prefix: str = ""
    public_url: str = ""


class CloudinaryConfig(BaseModel):
    """Cloudinary account used as the image host."""

    cloud_name: str = ""
    api_key: str = ""
    api_secret: str = ""
    upload_preset: str = "parish_uploads"
    timeout: float = 30.0


class StoreConfig(BaseModel):
    """A single named media store.

    ``backend`` is ``local``, ``s3``, ``cloudinary`` or a ``module:ClassName``
    import spec for a custom media host.
    """

    backend: str = "local"
    local_path: str = "./uploads"
    local_url_prefix: str = "/uploads"
    s3: S3Config = S3Config()
    cloudinary: CloudinaryConfig = CloudinaryConfig()


class StorageConfig(BaseModel):
    """Named media stores plus the default one."""

    default: str = "default"
    stores: dict[str, StoreConfig] = {"default": StoreConfig()}


class SessionConfig(BaseModel):
    """Cookie session settings (flash messages live in the session)."""

    max_age: int = 60 * 60 * 24 * 7
    cookie_domain: str | None = None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    debug: bool = False
    secret_key: str = "change-me"
    site_name: str = "Paróquia"

    db: DatabaseConfig = DatabaseConfig()
    storage: StorageConfig = StorageConfig()
    session: SessionConfig = SessionConfig()


@lru_cache
def get_settings() -> Settings:
    """Load settings from .env and app.yaml."""
    base_settings = Settings()

    try:
        app_config = load_app_config()
    except FileNotFoundError:
        return base_settings

    updates = {}

    if "db" in app_config:
        updates["db"] = DatabaseConfig(**app_config["db"])

    if "storage" in app_config:
        updates["storage"] = StorageConfig(**app_config["storage"])

    if "session" in app_config:
        updates["session"] = SessionConfig(**app_config["session"])

    if "site_name" in app_config:
        updates["site_name"] = app_config["site_name"]

    if updates:
        return base_settings.model_copy(update=updates)

    return base_settings
