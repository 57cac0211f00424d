"""Configuration helpers for the Wardrobe AI app."""

from dataclasses import dataclass, fields
from pathlib import Path
import os
from typing import Dict, Optional

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_STORAGE_KEY = "wardrobe_ai_data"
DEFAULT_WEATHER_API_URL = "https://api.open-meteo.com/v1/forecast"
DEFAULT_GEOLOCATION_API_URL = "http://ip-api.com/json/"

# Credential lookup order; the first one set wins.
API_KEY_SETTINGS = ("gemini_api_key", "google_api_key", "api_key")

# Field name -> setting name, where they differ.
_SETTING_ALIASES = {"model": "gemini_model"}


class MissingCredentialError(RuntimeError):
    """Raised when an AI call is attempted without an API key configured."""


@dataclass
class WardrobeConfig:
    """Configuration values for the Wardrobe AI app.

    Everything has a local default except the Gemini credential, which is only
    required once an AI-backed action runs.
    """

    api_key: Optional[str] = None
    model: str = DEFAULT_GEMINI_MODEL
    response_language: str = "Russian"
    storage_backend: str = "json"
    storage_path: str = "data/wardrobe"
    storage_key: str = DEFAULT_STORAGE_KEY
    request_timeout_seconds: float = 30.0
    weather_api_url: str = DEFAULT_WEATHER_API_URL
    geolocation: Optional[str] = "ip"
    geolocation_api_url: str = DEFAULT_GEOLOCATION_API_URL
    default_location: str = "Moscow"
    default_temperature: int = 15
    default_condition: str = "cloudy"
    environment: str | None = None

    def require_api_key(self) -> str:
        """Return the credential or fail before any network call is made."""

        if not self.api_key:
            raise MissingCredentialError(
                "Gemini API key not found. Set GEMINI_API_KEY (or GOOGLE_API_KEY / API_KEY)."
            )
        return self.api_key

    @classmethod
    def from_env(cls) -> "WardrobeConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default (or at ``APP_CONFIG_PATH``). Each setting is read from the
        upper-cased environment variable first, then from the YAML file.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("WARDROBE_CONFIG_DIR", "config/environments"))

        path: Optional[Path] = None
        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        yaml_config = cls._load_yaml_config(path) if path and path.exists() else {}

        def get_value(key: str) -> Optional[str]:
            return os.getenv(key.upper(), yaml_config.get(key))

        values: Dict[str, object] = {"environment": env_name}
        values["api_key"] = next(
            (value for value in map(get_value, API_KEY_SETTINGS) if value), None
        )
        for field in fields(cls):
            if field.name in values:
                continue
            raw = get_value(_SETTING_ALIASES.get(field.name, field.name))
            # An empty geolocation setting means "no location source".
            if raw is None or (raw == "" and field.name != "geolocation"):
                continue
            if field.name == "request_timeout_seconds":
                values[field.name] = float(raw)
            elif field.name == "default_temperature":
                values[field.name] = int(float(raw))
            else:
                values[field.name] = raw
        return cls(**values)  # type: ignore[arg-type]

    @staticmethod
    def _load_yaml_config(path: Path) -> Dict[str, str]:
        """Read flat ``key: value`` lines; comments and blank lines are skipped."""

        config: Dict[str, str] = {}
        for line in path.read_text().splitlines():
            key, separator, raw_value = line.partition(":")
            key = key.strip()
            if not separator or not key or key.startswith("#"):
                continue
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            config[key] = value
        return config
