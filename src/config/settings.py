"""
Connection settings.

Loaded once at startup from a YAML (or JSON) file and environment variables;
immutable afterwards. The file may use the camelCase JSON keys
(``servername``, ``ontologyPrefix``) or their snake_case forms.
"""

import logging
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from domain.errors import ConfigurationError
from domain.vocabularies import MLS_ONTOLOGY_PATH

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/lexicon.yaml"
PROTOCOLS = ("http", "https")


@dataclass(frozen=True)
class Settings:
    """Resource API connection parameters."""
    protocol: str = "http"
    servername: str = "localhost"
    port: int = 3333
    ontology_prefix: str = "http://0.0.0.0:3333"
    timeout: float = 30.0

    def __post_init__(self):
        if self.protocol not in PROTOCOLS:
            raise ConfigurationError(f"Unsupported protocol: {self.protocol!r}")
        if not self.servername:
            raise ConfigurationError("servername must not be empty")
        if not isinstance(self.port, int) or isinstance(self.port, bool) or not 0 < self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port!r}")
        if not self.ontology_prefix:
            raise ConfigurationError("ontology_prefix must not be empty")
        if self.timeout <= 0:
            raise ConfigurationError(f"Invalid timeout: {self.timeout!r}")

    @property
    def api_url(self) -> str:
        return f"{self.protocol}://{self.servername}:{self.port}"

    @property
    def mls_ontology(self) -> str:
        """IRI namespace of the MLS lexicon ontology for this tenant."""
        return self.ontology_prefix.rstrip("/") + MLS_ONTOLOGY_PATH

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Create settings from a dictionary (parsed YAML or JSON)."""
        defaults = cls.__dataclass_fields__
        try:
            return cls(
                protocol=data.get("protocol", defaults["protocol"].default),
                servername=data.get("servername", data.get("hostname", defaults["servername"].default)),
                port=_as_int(data.get("port", defaults["port"].default)),
                ontology_prefix=data.get(
                    "ontology_prefix",
                    data.get("ontologyPrefix", defaults["ontology_prefix"].default),
                ),
                timeout=float(data.get("timeout", defaults["timeout"].default)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed settings: {e}") from e

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> "Settings":
        """Load settings from a YAML file; missing file means defaults."""
        if path is None:
            path = os.getenv("LEXICON_CONFIG_PATH", DEFAULT_CONFIG_PATH)

        config_path = Path(path)
        if not config_path.is_absolute():
            config_path = Path.cwd() / path

        if not config_path.exists():
            logger.debug(f"No settings file at {config_path}, using defaults")
            return cls()

        with open(config_path, "r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"{config_path} does not contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, path: Optional[str] = None) -> "Settings":
        """
        Load settings from the YAML file, then apply environment overrides.

        Recognized variables: LEXICON_PROTOCOL, LEXICON_SERVERNAME,
        LEXICON_PORT, LEXICON_ONTOLOGY_PREFIX, LEXICON_TIMEOUT.
        """
        settings = cls.from_yaml(path)
        overrides: Dict[str, Any] = {}

        if os.getenv("LEXICON_PROTOCOL"):
            overrides["protocol"] = os.getenv("LEXICON_PROTOCOL")
        if os.getenv("LEXICON_SERVERNAME"):
            overrides["servername"] = os.getenv("LEXICON_SERVERNAME")
        if os.getenv("LEXICON_PORT"):
            overrides["port"] = _as_int(os.getenv("LEXICON_PORT"))
        if os.getenv("LEXICON_ONTOLOGY_PREFIX"):
            overrides["ontology_prefix"] = os.getenv("LEXICON_ONTOLOGY_PREFIX")
        if os.getenv("LEXICON_TIMEOUT"):
            try:
                overrides["timeout"] = float(os.getenv("LEXICON_TIMEOUT"))
            except ValueError as e:
                raise ConfigurationError(f"Invalid LEXICON_TIMEOUT: {e}") from e

        return replace(settings, **overrides) if overrides else settings


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid port: {value!r}") from e


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings (loaded on first use)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.info(f"Settings loaded: {_settings.api_url}, ontology prefix {_settings.ontology_prefix}")
    return _settings


def reload_settings(path: Optional[str] = None) -> Settings:
    """Reload settings from file and environment."""
    global _settings
    _settings = Settings.from_env(path)
    return _settings
