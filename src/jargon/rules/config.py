import re
import yaml
from pathlib import Path
from typing import Dict, Any
from pydantic import BaseModel, Field, field_validator


class FilesConfig(BaseModel):
    """Names of the glossary documents looked up in each root."""

    definitions: str = ".jargon.yml"
    known: str = ".jargon.known.yml"


class ScanConfig(BaseModel):
    pattern: str = r"[a-zA-Z][a-zA-Z-_]+"
    severity: str = "info"  # error, warning, info, hint
    source: str = "jargon"

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v):
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"pattern is not a valid regular expression: {e}")
        return v

    @field_validator("severity")
    @classmethod
    def validate_severity(cls, v):
        if v not in ("error", "warning", "info", "hint"):
            raise ValueError(
                f"severity must be 'error', 'warning', 'info' or 'hint', got '{v}'"
            )
        return v


class Config(BaseModel):
    files: FilesConfig = Field(default_factory=FilesConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)


def load_defaults() -> Dict[str, Any]:
    """Load default configuration from the package."""
    base_path = Path(__file__).parent.parent
    default_path = base_path / "defaults" / "config.yaml"

    if default_path.exists():
        with open(default_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return {}


def load_user_config() -> Dict[str, Any]:
    """Load user configuration from ~/.jargon/config.yaml."""
    home = Path.home()
    config_path = home / ".jargon" / "config.yaml"

    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return {}


def deep_merge(base: Dict[str, Any], update: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries."""
    result = base.copy()
    for k, v in update.items():
        if isinstance(v, dict) and k in result and isinstance(result[k], dict):
            result[k] = deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def load_config() -> Config:
    """Load and merge configuration from defaults and user overrides."""
    config_data = load_defaults()
    user_data = load_user_config()
    merged_data = deep_merge(config_data, user_data)
    return Config(**merged_data)
