"""Draft generation configuration with Pydantic v2 validation.

Every field has a default, so an empty file (or no file at all) yields the
standard scaffold values stamped on each draft record.  Detection
thresholds are fixed and deliberately absent from this schema.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load_string("author: security-team\\nproximity: 150\\n")
>>> config.proximity
150
>>> config.exports
['purview_xml', 'yaml', 'regex_copy']
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator


class DraftConfig(BaseModel):
    """Scaffold values applied to every emitted draft record."""

    model_config = {"extra": "allow"}

    schema_id: str = Field(default="testpattern/v1")
    version: str = Field(default="1.0.0")
    author: str = Field(default="testpattern-community")
    license: str = Field(default="MIT")
    exports: list[str] = Field(default_factory=lambda: ["purview_xml", "yaml", "regex_copy"])
    scope: str = Field(default="wide")
    proximity: int = Field(default=300, ge=1)
    max_keywords: int = Field(default=10, ge=1)
    max_samples: int = Field(default=5, ge=1)

    @field_validator("exports")
    @classmethod
    def exports_not_empty(cls, values: list[str]) -> list[str]:
        if not values:
            raise ValueError("exports must list at least one target")
        return values


class ConfigLoader:
    """Loads and validates draft generation YAML configuration."""

    def load(self, config_path: Path) -> DraftConfig:
        """Load and validate a configuration file.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ValueError:
            When the YAML content fails Pydantic validation.
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Draft config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        return DraftConfig.model_validate(raw)

    def load_string(self, yaml_content: str) -> DraftConfig:
        """Load and validate a YAML string directly."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return DraftConfig.model_validate(raw)

    def defaults(self) -> DraftConfig:
        """Return a configuration with all defaults applied."""
        return DraftConfig()
