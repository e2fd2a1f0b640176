"""
Industry configurations for the lead qualification engine.

Each industry names the topics the bot qualifies on and the metadata fields
it needs before a lead can be classified. Configs are read-only for the
lifetime of the process and are looked up through an IndustryRegistry that is
built once at startup and passed to the services that need it.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

REAL_ESTATE = "real_estate"
SOFTWARE = "software"


class IndustryConfig(BaseModel):
    """Read-only configuration for one industry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    qualifying_areas: Tuple[str, ...] = Field(default=(), alias="qualifyingAreas")
    required_fields_for_classification: Tuple[str, ...] = Field(
        default=(), alias="requiredFieldsForClassification"
    )


DEFAULT_INDUSTRIES: List[IndustryConfig] = [
    IndustryConfig(
        id=REAL_ESTATE,
        name="Real Estate",
        qualifying_areas=("location", "property type", "budget", "timeline", "purpose"),
        required_fields_for_classification=("location", "budget", "timeline", "propertyType"),
    ),
    IndustryConfig(
        id=SOFTWARE,
        name="Software Solutions",
        qualifying_areas=("business needs", "budget", "timeline", "decision authority", "company size"),
        required_fields_for_classification=("budget", "timeline"),
    ),
]


class IndustryRegistry:
    """Lookup table of industry configurations keyed by id."""

    def __init__(self, configs: Optional[List[IndustryConfig]] = None):
        self._configs: Dict[str, IndustryConfig] = {}
        for config in configs if configs is not None else DEFAULT_INDUSTRIES:
            self._configs[config.id] = config

    @classmethod
    def from_directory(cls, directory: Union[str, Path]) -> "IndustryRegistry":
        """
        Build a registry from the defaults plus every ``<id>.json`` file in a directory.

        A file overrides the built-in config with the same id. The file name
        (without extension) is the industry id when the file does not set one.

        Args:
            directory: Folder containing industry JSON files

        Returns:
            IndustryRegistry with defaults and loaded configs
        """
        registry = cls()
        path = Path(directory)
        if not path.is_dir():
            logger.warning(f"Industry config directory not found: {path}, using defaults")
            return registry

        for file in sorted(path.glob("*.json")):
            data = json.loads(file.read_text(encoding="utf-8"))
            data.setdefault("id", file.stem)
            config = IndustryConfig.model_validate(data)
            registry.register(config)
            logger.info(f"Loaded configuration for {config.id}")

        return registry

    def register(self, config: IndustryConfig):
        self._configs[config.id] = config

    def get(self, industry_id: str) -> Optional[IndustryConfig]:
        return self._configs.get(industry_id)

    def list_all(self) -> List[IndustryConfig]:
        return list(self._configs.values())
